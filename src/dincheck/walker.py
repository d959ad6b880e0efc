from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

from dincheck.errors import ScanIssue

logger = logging.getLogger(__name__)

# Directory suffixes that macOS presents as single opaque documents.
PACKAGE_SUFFIXES: frozenset[str] = frozenset(
    {
        ".app",
        ".bundle",
        ".framework",
        ".kext",
        ".pkg",
        ".plugin",
        ".photoslibrary",
        ".rtfd",
        ".xcarchive",
    }
)

PrunePredicate = Callable[[os.DirEntry], bool]


def is_package_bundle(entry: os.DirEntry) -> bool:
    return os.path.splitext(entry.name)[1].lower() in PACKAGE_SUFFIXES


def default_prune(platform: str | None = None) -> PrunePredicate | None:
    """Return the platform's default exclusion predicate (None descends everything)."""

    platform = sys.platform if platform is None else platform
    if platform == "darwin":
        return is_package_bundle
    return None


def collect_files(
    root: str | Path,
    *,
    manifest_name: str,
    prune: PrunePredicate | None = None,
) -> tuple[list[str], list[ScanIssue]]:
    """Enumerate regular files under root without following symlinks.

    Returns absolute paths in no particular order plus the per-entry errors met
    on the way. Symlinks, FIFOs, sockets and device nodes are skipped, as is
    any file named ``manifest_name`` at any depth.
    """

    files: list[str] = []
    issues: list[ScanIssue] = []
    stack = [os.fspath(root)]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for entry in it:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            if prune is not None and prune(entry):
                                logger.debug("Not descending into package %s", entry.path)
                                continue
                            stack.append(entry.path)
                        elif entry.is_file(follow_symlinks=False):
                            if entry.name == manifest_name:
                                continue
                            files.append(entry.path)
                        else:
                            logger.debug("Skipping non-regular entry %s", entry.path)
                    except OSError as exc:
                        issues.append(ScanIssue.from_exception("stat", entry.path, exc))
        except OSError as exc:
            issues.append(ScanIssue.from_exception("traverse", current, exc))

    return files, issues
