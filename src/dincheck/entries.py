from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dincheck.config import DincheckConfig
from dincheck.errors import HashingFailed, ScanIssue, display_path
from dincheck.hashing import sha256_file
from dincheck.walker import PrunePredicate, collect_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanResult:
    entries: dict[str, str]
    issues: tuple[ScanIssue, ...]


def relative_path(path: str, root: str) -> str:
    """Root-relative POSIX form of an absolute path yielded by the walker."""

    if path == root:
        return "."
    prefix = root if root.endswith(os.sep) else root + os.sep
    if path.startswith(prefix):
        path = path[len(prefix):]
    return Path(path).as_posix()


def compute_entries(
    root: str | Path,
    *,
    config: DincheckConfig,
    prune: PrunePredicate | None = None,
) -> ScanResult:
    """Hash every regular file under root into a {relative_path: digest} map.

    Files that cannot be read are left out and reported in ``issues``.
    """

    root_str = os.fspath(root)
    paths, issues = collect_files(root_str, manifest_name=config.manifest_name, prune=prune)
    logger.info("Scanning %d files under %s", len(paths), root_str)

    entries: dict[str, str] = {}
    for path in paths:
        rel = relative_path(path, root_str)
        try:
            rel.encode("utf-8")
        except UnicodeEncodeError as exc:
            # Manifest lines are UTF-8; a name that is not cannot be recorded.
            issues.append(ScanIssue("encode", display_path(path), exc.reason))
            continue
        try:
            digest = sha256_file(path, chunk_size=config.chunk_size)
        except HashingFailed as exc:
            issues.append(ScanIssue.from_exception("hash", path, exc.cause))
            continue
        entries[rel] = digest

    return ScanResult(entries=entries, issues=tuple(issues))
