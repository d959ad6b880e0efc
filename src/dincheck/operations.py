"""The three top-level verbs: create, verify, update.

Each returns an OperationOutcome; fatal conditions raise DincheckError.
Rendering the outcome is left to the caller (see ``dincheck.report``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dincheck.config import DincheckConfig
from dincheck.entries import compute_entries
from dincheck.errors import (
    ManifestAlreadyExists,
    ManifestNotFound,
    NotADirectory,
    ScanIssue,
)
from dincheck.manifest import load_manifest, manifest_exists, manifest_path, write_manifest
from dincheck.reconcile import ReconciliationResult, reconcile
from dincheck.walker import PrunePredicate

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_DIFFERENCES = 2


@dataclass(frozen=True, slots=True)
class OperationOutcome:
    operation: str
    root: Path
    manifest_path: Path
    entries_count: int
    result: ReconciliationResult | None
    issues: tuple[ScanIssue, ...]
    exit_code: int


def normalize_root(path: str | Path) -> Path:
    root = Path(os.path.abspath(os.fspath(path)))
    if not root.is_dir():
        raise NotADirectory(root)
    return root


def create_manifest(
    root: str | Path,
    *,
    config: DincheckConfig,
    prune: PrunePredicate | None = None,
) -> OperationOutcome:
    root_path = normalize_root(root)
    target = manifest_path(root_path, config)
    if manifest_exists(target):
        raise ManifestAlreadyExists(target)

    logger.info("Creating new manifest at %s", target)
    scan = compute_entries(root_path, config=config, prune=prune)
    write_manifest(target, scan.entries)

    return OperationOutcome(
        operation="create",
        root=root_path,
        manifest_path=target,
        entries_count=len(scan.entries),
        result=None,
        issues=scan.issues,
        exit_code=EXIT_OK,
    )


def verify_manifest(
    root: str | Path,
    *,
    config: DincheckConfig,
    prune: PrunePredicate | None = None,
) -> OperationOutcome:
    root_path = normalize_root(root)
    target = manifest_path(root_path, config)
    if not manifest_exists(target):
        raise ManifestNotFound(target)

    old = load_manifest(target)
    logger.info("Loaded manifest with %d entries.", len(old))

    scan = compute_entries(root_path, config=config, prune=prune)
    result = reconcile(old, scan.entries)

    return OperationOutcome(
        operation="verify",
        root=root_path,
        manifest_path=target,
        entries_count=len(scan.entries),
        result=result,
        issues=scan.issues,
        exit_code=EXIT_DIFFERENCES if result.has_differences else EXIT_OK,
    )


def update_manifest(
    root: str | Path,
    *,
    config: DincheckConfig,
    prune: PrunePredicate | None = None,
) -> OperationOutcome:
    root_path = normalize_root(root)
    target = manifest_path(root_path, config)

    if manifest_exists(target):
        old = load_manifest(target)
        logger.info("Loaded existing manifest with %d entries.", len(old))
    else:
        old = {}
        logger.info("No existing manifest found; will create a new one.")

    scan = compute_entries(root_path, config=config, prune=prune)
    result = reconcile(old, scan.entries)

    logger.info("Updating manifest at %s", target)
    write_manifest(target, scan.entries)

    return OperationOutcome(
        operation="update",
        root=root_path,
        manifest_path=target,
        entries_count=len(scan.entries),
        result=result,
        issues=scan.issues,
        exit_code=EXIT_OK,
    )


OPERATIONS = {
    "create": create_manifest,
    "verify": verify_manifest,
    "update": update_manifest,
}
