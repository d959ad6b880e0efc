"""Manifest codec.

Format (one entry per line, sorted by path, LF, trailing newline)::

    <sha256>  <relative/path>

Loading is tolerant: a missing or unreadable manifest loads as empty and
malformed lines are skipped. Writing is atomic.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dincheck.config import DincheckConfig
from dincheck.errors import ManifestWriteFailed
from dincheck.fileio import atomic_write_text

logger = logging.getLogger(__name__)


def manifest_path(root: str | Path, config: DincheckConfig) -> Path:
    return Path(root) / config.manifest_name


def manifest_exists(path: str | Path) -> bool:
    # A dangling symlink counts: create refuses it, verify and update read it as empty.
    return os.path.lexists(path)


def parse_manifest(text: str) -> dict[str, str]:
    entries: dict[str, str] = {}
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        # Split on the first whitespace run only; paths may contain spaces.
        parts = line.split(None, 1)
        if len(parts) != 2:
            continue
        digest, rel_path = parts
        entries[rel_path] = digest
    return entries


def render_manifest(entries: Mapping[str, str]) -> str:
    lines = [f"{entries[rel]}  {rel}" for rel in sorted(entries)]
    return "\n".join(lines) + "\n"


def load_manifest(path: str | Path) -> dict[str, str]:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8", errors="strict")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Treating manifest %s as empty: %s", p, exc)
        return {}
    return parse_manifest(text)


def write_manifest(path: str | Path, entries: Mapping[str, str]) -> None:
    p = Path(path)
    try:
        atomic_write_text(p, render_manifest(entries))
    except (OSError, UnicodeError) as exc:
        raise ManifestWriteFailed(p, exc) from exc
