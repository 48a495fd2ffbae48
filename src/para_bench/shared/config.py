"""Harness-wide defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar, overload

from para_bench.errors import ConfigurationError

_ENV_PREFIX = "PARABENCH_"

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class BenchConfig:
    """Defaults used when a call does not say otherwise.

    `probe_timeout_ms` bounds every phase of the probes run by `compare()`
    (`None` means no deadline). `check_timeout_ms` and `check_arg` are what
    `check()` uses, `min_time` is the significance threshold for flattening.
    """

    probe_timeout_ms: float | None = None
    check_timeout_ms: float = 1.0
    check_arg: int = 1
    min_time: float = 0.004

    @classmethod
    def default(cls) -> "BenchConfig":
        return cls()

    @classmethod
    def from_env(cls) -> "BenchConfig":
        """Builds a config from `PARABENCH_*` variables on top of the defaults.

        Recognised keys:
        - `PARABENCH_PROBE_TIMEOUT_MS` (empty or 0 disables the deadline)
        - `PARABENCH_CHECK_TIMEOUT_MS`
        - `PARABENCH_CHECK_ARG`
        - `PARABENCH_MIN_TIME` (seconds)
        """

        base = cls.default()
        probe_timeout = _read("PROBE_TIMEOUT_MS", float)
        return cls(
            probe_timeout_ms=probe_timeout or base.probe_timeout_ms,
            check_timeout_ms=_read("CHECK_TIMEOUT_MS", float, base.check_timeout_ms),
            check_arg=_read("CHECK_ARG", int, base.check_arg),
            min_time=_read("MIN_TIME", float, base.min_time),
        )

    def __post_init__(self) -> None:
        if self.check_arg < 1:
            raise ConfigurationError("check_arg must be a positive integer")
        if self.check_timeout_ms < 0:
            raise ConfigurationError("check_timeout_ms must not be negative")
        if self.min_time < 0:
            raise ConfigurationError("min_time must not be negative")


@overload
def _read(key: str, convert: Callable[[str], T], default: T) -> T: ...


@overload
def _read(key: str, convert: Callable[[str], T], default: None = None) -> T | None: ...


def _read(key: str, convert: Callable[[str], T], default: T | None = None) -> T | None:
    raw = (os.getenv(_ENV_PREFIX + key) or "").strip()
    if not raw:
        return default
    try:
        return convert(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{_ENV_PREFIX}{key}: cannot parse {raw!r}") from exc
