from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


class DincheckError(Exception):
    """Fatal condition that aborts the current operation."""

    exit_code = 1


class NotADirectory(DincheckError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Root path is not a directory: {self.path}")


class ManifestAlreadyExists(DincheckError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Manifest already exists at {self.path}. Use 'update' instead.")


class ManifestNotFound(DincheckError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"No manifest found at {self.path}. Run 'create' first.")


class ManifestWriteFailed(DincheckError):
    def __init__(self, path: str | Path, cause: BaseException) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to write manifest {self.path}: {cause}")


class ConfigError(DincheckError):
    pass


class HashingFailed(Exception):
    """Per-file read failure; recoverable, the scan continues without the file."""

    def __init__(self, path: str | Path, cause: BaseException) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")


def display_path(path: str | Path) -> str:
    """Printable form of a filesystem path; undecodable bytes become \\xNN escapes."""

    raw = os.fsencode(path)
    return raw.decode("utf-8", errors="backslashreplace")


_ISSUE_VERBS = {
    "hash": "hashing",
    "stat": "reading attributes for",
    "traverse": "traversing",
    "encode": "encoding the name of",
}


@dataclass(frozen=True, slots=True)
class ScanIssue:
    """One recoverable per-item failure collected during a scan."""

    kind: str
    path: str
    cause: str

    @classmethod
    def from_exception(cls, kind: str, path: str | Path, exc: BaseException) -> ScanIssue:
        cause = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        return cls(kind=kind, path=display_path(path), cause=cause)

    def describe(self) -> str:
        verb = _ISSUE_VERBS.get(self.kind, self.kind)
        return f"Error {verb} {self.path}: {self.cause}"
