# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .domain.errors import ConfigurationError

DEFAULT_CAPACITY = 20
DEFAULT_PROGRESS_MS = 500


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


@dataclass
class ScanSettings:
    """
    Tunables for one scan. CLI options override values taken from the environment.

    Environment:
      DIRTALLY_CONCURRENCY   gate capacity (default 20)
      DIRTALLY_PROGRESS_MS   progress interval in milliseconds (default 500)
    """

    capacity: int = DEFAULT_CAPACITY
    progress_ms: int = DEFAULT_PROGRESS_MS
    verbose: bool = False
    report_partial: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ScanSettings":
        env = os.environ if env is None else env
        return cls(
            capacity=_int_env(env, "DIRTALLY_CONCURRENCY", DEFAULT_CAPACITY),
            progress_ms=_int_env(env, "DIRTALLY_PROGRESS_MS", DEFAULT_PROGRESS_MS),
        )

    def validate(self) -> "ScanSettings":
        if self.capacity < 1:
            raise ConfigurationError(f"concurrency must be >= 1, got {self.capacity}")
        if self.progress_ms <= 0:
            raise ConfigurationError(
                f"progress interval must be > 0 ms, got {self.progress_ms}"
            )
        return self

    @property
    def progress_interval(self) -> Optional[float]:
        """Seconds between progress lines, or None when progress is off."""
        return self.progress_ms / 1000.0 if self.verbose else None
