"""Measurement records produced by the harness.

All times are in seconds, with whatever precision the clock provides, and
exclude setup, teardown and surrounding code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class CpuTimes:
    """Process CPU time split into user and kernel space."""

    user: float
    system: float


@dataclass(frozen=True, slots=True)
class CpuStat:
    """Result of one probe: one run of one implementation for one ``n``."""

    n: int
    time: float
    iter: float
    user: float | None = None
    system: float | None = None
    cpu: float | None = None
    err: Any = None

    @classmethod
    def from_readings(
        cls,
        n: int,
        *,
        started: float,
        finished: float,
        cpu_before: CpuTimes | None = None,
        cpu_after: CpuTimes | None = None,
        err: Any = None,
    ) -> "CpuStat":
        time = finished - started
        user = system = cpu = None
        if cpu_before is not None and cpu_after is not None:
            user = cpu_after.user - cpu_before.user
            system = cpu_after.system - cpu_before.system
            cpu = user + system
        return cls(
            n=n,
            time=time,
            iter=time / n,
            user=user,
            system=system,
            cpu=cpu,
            err=err or None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"n": self.n, "time": self.time, "iter": self.iter}
        for key in ("user", "system", "cpu", "err"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


@dataclass(frozen=True, slots=True)
class TeardownInfo:
    """What teardown gets to inspect after a measured run."""

    n: int
    input: Any
    output: Any


@dataclass(frozen=True, slots=True)
class TeardownFailure:
    """Notification sent when teardown reports a problem."""

    n: int
    name: str | None
    err: Any


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """State of a running sweep after one completed probe."""

    name: str
    n: int
    result: CpuStat
    count: int
    cumulative_time: float
    max_time: float | None
    total_time: float
    total_max_time: float

    @property
    def percent(self) -> float | None:
        """Share of the total time budget used so far, if there is a budget."""

        if not self.total_max_time:
            return None
        return min(100.0, 100.0 * self.total_time / self.total_max_time)
