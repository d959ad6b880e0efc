from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

DEFAULT_FILE_MODE = 0o644


def _target_mode(target: Path) -> int:
    # mkstemp creates 0600; keep the replaced file's mode instead.
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return DEFAULT_FILE_MODE


def atomic_write_text(path: str | Path, text: str) -> None:
    """Replace ``path`` with ``text`` (UTF-8, LF) or leave it untouched.

    The content goes to a temp file in the same directory, is fsynced, then
    renamed over the target. On any failure the temp file is removed and the
    error propagates.
    """

    target = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="strict", newline="\n") as f:
            os.fchmod(f.fileno(), _target_mode(target))
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
