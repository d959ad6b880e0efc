from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dincheck.errors import ConfigError

DEFAULT_MANIFEST_NAME = ".checksums.sha256"
DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_LOG_LEVEL = "INFO"


def _env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class DincheckConfig:
    manifest_name: str = DEFAULT_MANIFEST_NAME
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        name = self.manifest_name
        if not name or name in {".", ".."} or "/" in name or "\x00" in name:
            raise ConfigError(f"Invalid manifest file name: {name!r}")
        if self.chunk_size <= 0:
            raise ConfigError(f"Chunk size must be > 0, got {self.chunk_size}")


def load_config_from_env() -> DincheckConfig:
    return DincheckConfig(
        manifest_name=str(_env("DINCHECK_MANIFEST_NAME", default=DEFAULT_MANIFEST_NAME)),
        chunk_size=_env_int("DINCHECK_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
    )


def resolve_log_level(*, verbose: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    raw = str(_env("DINCHECK_LOG_LEVEL", default=DEFAULT_LOG_LEVEL)).strip().upper()
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        raise ConfigError(f"Unknown DINCHECK_LOG_LEVEL: {raw!r}")
    return level
