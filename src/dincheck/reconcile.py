from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    ok: frozenset[str]
    changed: frozenset[str]
    missing: frozenset[str]
    new: frozenset[str]

    @property
    def has_differences(self) -> bool:
        return bool(self.changed or self.missing or self.new)

    def counts(self) -> dict[str, int]:
        return {
            "ok": len(self.ok),
            "changed": len(self.changed),
            "missing": len(self.missing),
            "new": len(self.new),
        }


def reconcile(old: Mapping[str, str], current: Mapping[str, str]) -> ReconciliationResult:
    """Classify every path of ``old`` and ``current``. Neither input is modified."""

    ok: set[str] = set()
    changed: set[str] = set()
    missing: set[str] = set()

    for path, old_digest in old.items():
        current_digest = current.get(path)
        if current_digest is None:
            missing.add(path)
        elif current_digest == old_digest:
            ok.add(path)
        else:
            changed.add(path)

    new = {path for path in current if path not in old}

    return ReconciliationResult(
        ok=frozenset(ok),
        changed=frozenset(changed),
        missing=frozenset(missing),
        new=frozenset(new),
    )
