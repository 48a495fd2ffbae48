"""Clock sources and CPU-time providers.

Both are plain callables so they can be replaced with fakes:

- a clock returns monotonic seconds as a float,
- a CPU-time provider returns `CpuTimes` or `None` when the platform
  cannot report CPU usage.
"""

from __future__ import annotations

import time
from typing import Callable

from .errors import InvalidArgumentError
from .models import CpuTimes

try:  # stdlib, but POSIX only
    import resource
except ImportError:  # pragma: no cover - Windows
    resource = None  # type: ignore[assignment]


Clock = Callable[[], float]
CpuTimeProvider = Callable[[], CpuTimes | None]

perf_clock: Clock = time.perf_counter


def process_cpu_time() -> CpuTimes:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return CpuTimes(user=usage.ru_utime, system=usage.ru_stime)


def no_cpu_time() -> None:
    return None


def default_cpu_time() -> CpuTimeProvider:
    """Returns the best CPU-time provider available on this platform."""

    return process_cpu_time if resource is not None else no_cpu_time


def get_time_res(attempts: int = 15, *, clock: Clock = perf_clock) -> float:
    """Estimates the clock tick size in seconds.

    Busy-polls `clock` until it has changed value `attempts` times and
    returns the average step. Meant as a sanity check that the clock is fine
    grained enough for the shortest measurements taken.
    """

    if not (isinstance(attempts, int) and attempts > 0):
        raise InvalidArgumentError("attempts must be a positive integer")

    first = clock()
    last = first
    remaining = attempts
    while remaining > 0:
        now = clock()
        if now == last:
            continue
        last = now
        remaining -= 1
    return (last - first) / attempts
