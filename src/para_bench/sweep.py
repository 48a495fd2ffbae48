"""Sweep scheduling: many probes across an argument progression.

Arguments are visited in ascending order. For every argument each variant
that is still pending gets `repeat` consecutive probes; a variant stops being
pending once its accumulated measured time exceeds `max_time`, and the sweep
ends as soon as no variant is pending.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, Iterator

import structlog

from .errors import ConfigurationError
from .hooks import ProgressHook
from .models import CpuStat, ProgressSnapshot
from .variants import Variant

ProbeFn = Callable[[int, Variant, str], Awaitable[CpuStat]]


def next_arg(n: int) -> int:
    """`ceil(n * 4 / 3)` in exact integer arithmetic."""

    return (n * 4 + 2) // 3


class ArgProgression:
    """Geometric argument sequence `min_arg, ceil(min_arg * 4/3), ...`.

    Bounded by `max_arg` when given, otherwise infinite (the sweep is then
    stopped by its time budget). Every iteration starts over from `min_arg`.
    """

    def __init__(self, min_arg: int = 1, max_arg: int | None = None) -> None:
        if isinstance(min_arg, bool) or not isinstance(min_arg, int) or min_arg < 1:
            raise ConfigurationError("min_arg must be a positive integer")
        self.min_arg = min_arg
        self.max_arg = max_arg

    def __iter__(self) -> Iterator[int]:
        n = self.min_arg
        while self.max_arg is None or n <= self.max_arg:
            yield n
            n = next_arg(n)

    def __repr__(self) -> str:
        return f"ArgProgression(min_arg={self.min_arg}, max_arg={self.max_arg})"


class Sweep:
    """State of one `compare()` run. Not reusable."""

    def __init__(
        self,
        variants: dict[str, Variant],
        args: Iterable[int],
        *,
        probe: ProbeFn,
        max_time: float | None = None,
        repeat: int = 1,
        keep_going: bool = False,
        on_progress: ProgressHook,
    ) -> None:
        self._variants = variants
        self._args = args
        self._probe = probe
        self._max_time = max_time
        self._repeat = repeat
        self._keep_going = keep_going
        self._on_progress = on_progress
        self._logger = structlog.get_logger(__name__)

        self._pending = set(variants)
        self._failed: set[str] = set()
        self._time_spent = {name: 0.0 for name in variants}
        self._out: dict[str, list[CpuStat]] = {name: [] for name in variants}

        # progress reporting only
        self._count = 0
        self._total_time = 0.0
        self._total_max_time = (max_time or 0) * len(variants)

    def _schedule(self) -> Iterator[tuple[str, int]]:
        for n in self._args:
            if not self._pending:
                return
            for name in self._variants:
                if name not in self._pending:
                    continue
                for _ in range(self._repeat):
                    if name in self._failed:
                        break
                    yield name, n

    async def run(self) -> dict[str, list[CpuStat]]:
        for name, n in self._schedule():
            try:
                piece = await self._probe(n, self._variants[name], name)
            except Exception as exc:
                if not self._keep_going:
                    raise
                self._logger.warning("probe-failed", variant=name, n=n, error=str(exc))
                self._failed.add(name)
                self._pending.discard(name)
            else:
                self._record(name, n, piece)
            await asyncio.sleep(0)

        self._logger.debug(
            "sweep-finished",
            probes=self._count,
            total_time=self._total_time,
            failed=sorted(self._failed),
        )
        return self._out

    def _record(self, name: str, n: int, piece: CpuStat) -> None:
        spent = self._time_spent[name] = self._time_spent[name] + piece.time
        if self._max_time is not None and spent > self._max_time and name in self._pending:
            self._pending.discard(name)
            self._logger.info("variant-exhausted", variant=name, n=n, time_spent=spent)
        self._out[name].append(piece)
        self._count += 1
        self._total_time += piece.time
        self._on_progress(
            ProgressSnapshot(
                name=name,
                n=n,
                result=piece,
                count=self._count,
                cumulative_time=spent,
                max_time=self._max_time,
                total_time=self._total_time,
                total_max_time=self._total_max_time,
            )
        )
