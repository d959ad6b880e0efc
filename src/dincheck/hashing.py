from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO

from dincheck.config import DEFAULT_CHUNK_SIZE
from dincheck.errors import HashingFailed

DIGEST_HEX_LENGTH = 64


def digest_stream(handle: BinaryIO, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    digest = hashlib.sha256()
    for chunk in iter(lambda: handle.read(chunk_size), b""):
        digest.update(chunk)
    return digest.hexdigest()


def sha256_file(path: str | Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Return the lowercase hex SHA-256 of a file, read in fixed-size chunks.

    Raises HashingFailed for any I/O error so callers can skip the file.
    """

    file_path = Path(path)
    try:
        with file_path.open("rb") as f:
            return digest_stream(f, chunk_size=chunk_size)
    except OSError as exc:
        raise HashingFailed(file_path, exc) from exc
