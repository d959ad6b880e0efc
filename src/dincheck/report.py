from __future__ import annotations

from pathlib import Path
from typing import Any

from dincheck import __version__
from dincheck.errors import display_path
from dincheck.operations import OperationOutcome
from dincheck.reconcile import ReconciliationResult
from dincheck.stable_json import write_json

REPORT_SCHEMA_VERSION = "1.0.0"

STATUS_CLEAN = "Verification: CLEAN (no differences)."
STATUS_DIFFERENCES = "Verification: differences detected."


def format_differences(result: ReconciliationResult) -> list[str]:
    lines = [f"CHANGED: {p}" for p in sorted(result.changed)]
    lines.extend(f"MISSING: {p}" for p in sorted(result.missing))
    lines.extend(f"NEW: {p}" for p in sorted(result.new))
    return lines


def format_summary(result: ReconciliationResult) -> list[str]:
    counts = result.counts()
    return [
        "",
        "Summary:",
        f"  OK:       {counts['ok']}",
        f"  CHANGED:  {counts['changed']}",
        f"  MISSING:  {counts['missing']}",
        f"  NEW:      {counts['new']}",
    ]


def format_status(result: ReconciliationResult) -> str:
    return STATUS_DIFFERENCES if result.has_differences else STATUS_CLEAN


def format_outcome(outcome: OperationOutcome) -> list[str]:
    """Lines for stdout describing a finished operation."""

    if outcome.operation == "create":
        return [f"Created manifest with {outcome.entries_count} entries."]

    result = outcome.result
    if result is None:
        raise ValueError(f"{outcome.operation} outcome carries no reconciliation result")
    lines = format_differences(result) + format_summary(result)
    if outcome.operation == "verify":
        lines.append(format_status(result))
    else:
        lines.append(
            f"Updated manifest at {outcome.manifest_path} ({outcome.entries_count} entries)."
        )
    return lines


def build_report(outcome: OperationOutcome) -> dict[str, Any]:
    result = outcome.result
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "tool_version": __version__,
        "operation": outcome.operation,
        "root": display_path(outcome.root),
        "manifest_path": display_path(outcome.manifest_path),
        "exit_code": outcome.exit_code,
        "entries_count": outcome.entries_count,
        "counts": None if result is None else result.counts(),
        "changed": None if result is None else sorted(result.changed),
        "missing": None if result is None else sorted(result.missing),
        "new": None if result is None else sorted(result.new),
        "issues": [
            {"kind": i.kind, "path": i.path, "cause": i.cause}
            for i in sorted(outcome.issues, key=lambda i: (i.path, i.kind))
        ],
    }


def write_report(path: str | Path, outcome: OperationOutcome) -> None:
    write_json(path, build_report(outcome), make_parents=True)
