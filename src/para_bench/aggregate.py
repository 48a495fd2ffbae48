"""Reduction of raw comparison data into plot-ready series.

Repeated samples for the same `(variant, n)` are collapsed into one robust
figure: the median when there are few of them, otherwise the mean after
winsorizing the 7 most extreme samples on each side. Points shorter than
`min_time` are dominated by clock noise and are dropped.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Iterable, Mapping

from .errors import ConfigurationError
from .models import CpuStat
from .stats import Accumulator, Univariate

DEFAULT_MIN_TIME = 0.004
TRIM = 7
MEDIAN_BELOW = 2 * TRIM

STATS = ("time", "cpu")


@dataclass(slots=True)
class FlatSeries:
    """Per-variant series aligned against a shared, ascending `n` axis.

    `times[name][i]` and `ops[name][i]` belong to `n[i]` and are `None` where
    that variant has no significant measurement.
    """

    n: list[int] = field(default_factory=list)
    times: dict[str, list[float | None]] = field(default_factory=dict)
    ops: dict[str, list[float | None]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _sample(entry: CpuStat | Mapping[str, Any], what: str) -> tuple[int, float | None]:
    if isinstance(entry, Mapping):
        return entry["n"], entry.get(what)
    return entry.n, getattr(entry, what)


def aggregate_probes(
    probes: Iterable[CpuStat | Mapping[str, Any]],
    what: str = "time",
    *,
    accumulator: Callable[[], Accumulator] = Univariate,
) -> dict[int, Accumulator]:
    """Groups samples by `n`, feeding each group into its own accumulator."""

    out: dict[int, Accumulator] = {}
    for entry in probes:
        n, value = _sample(entry, what)
        if value is None:
            continue
        if n not in out:
            out[n] = accumulator()
        out[n].add(value)
    return out


def reduce_samples(stat: Accumulator) -> float:
    if stat.count() < MEDIAN_BELOW:
        return stat.median()
    return stat.clone(ltrim=TRIM, rtrim=TRIM, winsorize=True).mean()


def flatten_data(
    comparison: Mapping[str, Iterable[CpuStat | Mapping[str, Any]]],
    *,
    min_time: float | None = None,
    use_stat: str = "time",
    accumulator: Callable[[], Accumulator] = Univariate,
) -> FlatSeries:
    """Turns the output of `ParaBench.compare()` into aligned series.

    An `n` survives if at least one variant measured it for `min_time` or
    longer (default 0.004 s). Variants with no surviving point at all get
    empty series.
    """

    threshold = DEFAULT_MIN_TIME if min_time is None else min_time
    if use_stat not in STATS:
        raise ConfigurationError(f"use_stat must be one of {', '.join(STATS)}, got {use_stat!r}")

    reduced: dict[str, dict[int, float]] = {}
    for name, probes in comparison.items():
        groups = aggregate_probes(probes, use_stat, accumulator=accumulator)
        values = {n: reduce_samples(stat) for n, stat in groups.items()}
        reduced[name] = {n: value for n, value in values.items() if value >= threshold}

    arg_list = sorted({n for values in reduced.values() for n in values})

    out = FlatSeries(n=arg_list)
    for name, values in reduced.items():
        if not values:
            out.times[name] = []
            out.ops[name] = []
            continue
        times = [values.get(n) for n in arg_list]
        out.times[name] = times
        out.ops[name] = [n / t if t else None for n, t in zip(arg_list, times)]
    return out
