"""dincheck: content-hash manifests for detecting silent file corruption.

A manifest (``.checksums.sha256`` at the scanned root) records the SHA-256 of
every regular file under the root. ``create`` writes it, ``verify`` diffs the
live tree against it, ``update`` reports the diff and rewrites it.
"""

__version__ = "1.0.0"

__all__: list[str] = [
    "cli",
    "config",
    "entries",
    "errors",
    "fileio",
    "hashing",
    "manifest",
    "operations",
    "reconcile",
    "report",
    "stable_json",
    "walker",
]
