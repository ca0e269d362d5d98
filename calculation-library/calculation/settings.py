"""Engine settings read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_MAX_WORKERS = 4
DEFAULT_MAX_BUILD_WORKERS = 4


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = int(raw)
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def _path_env(name: str) -> tuple[str, ...]:
    raw = os.environ.get(name, "")
    return tuple(p for p in raw.split(os.pathsep) if p.strip())


@dataclass(frozen=True)
class EngineSettings:
    """
    Process-wide engine settings.

    - CALC_MAX_WORKERS: worker threads for (target, measure) cells
    - CALC_MAX_BUILD_WORKERS: worker threads for one market-data build layer
    - CALC_REFDATA_PATH: extra reference data directories (os.pathsep separated)
    """

    max_workers: int = DEFAULT_MAX_WORKERS
    max_build_workers: int = DEFAULT_MAX_BUILD_WORKERS
    refdata_path: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls) -> "EngineSettings":
        return cls(
            max_workers=_int_env("CALC_MAX_WORKERS", DEFAULT_MAX_WORKERS),
            max_build_workers=_int_env("CALC_MAX_BUILD_WORKERS", DEFAULT_MAX_BUILD_WORKERS),
            refdata_path=_path_env("CALC_REFDATA_PATH"),
        )
