"""Asynchronous parametric benchmarking harness.

A snippet of code is executed with different values of a positive integer
parameter `n` that is expected to affect its execution time. Before each run
the input is built by the setup hook (by default `n` itself); afterwards the
teardown hook may verify the output and release resources. Only the run in
between is measured, in wall clock time and, where the platform allows, CPU
time.

Instead of endlessly repeating the same code, the idea is to plot execution
time against `n` and spot things like cache effects or the crossing point of
a naive but fast implementation and an asymptotically better one.

Example::

    bench = (
        ParaBench()
        .setup(lambda n: list(range(n, 0, -1)))
        .teardown(lambda info: None if info.output == sorted(info.input) else "unsorted")
        .add("builtin", sorted)
    )
    raw = asyncio.run(bench.compare(max_arg=10**5, max_time=1))
    series = flatten_data(raw)
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Awaitable, Callable, Iterable, Mapping

import structlog

from .aggregate import FlatSeries, flatten_data
from .bounded import call_maybe_async, run_bounded
from .clock import Clock, CpuTimeProvider, default_cpu_time, perf_clock
from .clock import get_time_res as measure_time_res
from .errors import ConfigurationError, InvalidArgumentError
from .hooks import Hooks, ProgressHook, SetupHook, TeardownFailureHook, TeardownHook
from .models import CpuStat, CpuTimes, TeardownFailure, TeardownInfo
from .shared.config import BenchConfig
from .stats import Accumulator, Univariate
from .sweep import ArgProgression, Sweep
from .variants import Variant, VariantRegistry

Execution = tuple[Any, float, float, CpuTimes | None, CpuTimes | None]


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ParaBench:
    """Measures and compares implementations across values of `n`.

    Hooks are held in an immutable `Hooks` record; the chainable setters
    swap one slot of it at a time. Every probe works with the record that was
    current when it started, and a sweep with the one current when `compare`
    was called.
    """

    def __init__(
        self,
        *,
        hooks: Hooks | None = None,
        clock: Clock = perf_clock,
        cpu_time: CpuTimeProvider | None = None,
        config: BenchConfig | None = None,
    ) -> None:
        self._hooks = hooks or Hooks()
        self._clock = clock
        self._cpu_time = cpu_time if cpu_time is not None else default_cpu_time()
        self._config = config or BenchConfig.default()
        self._registry = VariantRegistry()
        self._logger = structlog.get_logger(__name__)

    @property
    def hooks(self) -> Hooks:
        return self._hooks

    @property
    def config(self) -> BenchConfig:
        return self._config

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def setup(self, fun: SetupHook) -> "ParaBench":
        """Sets how the input is built from `n`; may return an awaitable."""

        self._hooks = replace(self._hooks, setup=fun)
        return self

    def teardown(self, fun: TeardownHook) -> "ParaBench":
        """Sets the output check run after each measurement.

        `fun` receives a `TeardownInfo(n, input, output)` and returns a falsy
        value when everything is fine, a description of the problem otherwise,
        or an awaitable resolving to one of those.
        """

        self._hooks = replace(self._hooks, teardown=fun)
        return self

    def on_teardown_fail(self, fun: TeardownFailureHook) -> "ParaBench":
        self._hooks = replace(self._hooks, on_teardown_failure=fun)
        return self

    def progress(self, fun: ProgressHook) -> "ParaBench":
        self._hooks = replace(self._hooks, on_progress=fun)
        return self

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    def add(self, name: str, implementation: Callable[[Any], Any] | None) -> "ParaBench":
        """Registers `implementation(input) -> output` under `name`.

        Passing `None` removes the variant.
        """

        self._registry.register(name, implementation)
        return self

    def add_async(self, name: str, implementation: Callable[[Any, Callable[[Any], None]], None] | None) -> "ParaBench":
        """Registers `implementation(input, done)` that reports via `done(output)`."""

        self._registry.register(name, implementation, is_async=True)
        return self

    def remove(self, name: str) -> "ParaBench":
        self._registry.remove(name)
        return self

    def list(self) -> list[str]:
        return self._registry.names()

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------

    def probe(
        self,
        n: int,
        implementation: Callable[..., Any] | Variant,
        *,
        is_async: bool = False,
        name: str | None = None,
        timeout: float | None = None,
    ) -> Awaitable[CpuStat]:
        """Measures one run of `implementation` for `n`.

        `n` is validated right away, before anything is awaited. Each phase
        (setup, execution, teardown) is separately bounded by `timeout`
        milliseconds and raises `PhaseTimeoutError` when it overruns.
        """

        if not _is_positive_int(n):
            raise InvalidArgumentError(f"probe requires a positive integer argument, got {n!r}")
        if isinstance(implementation, Variant):
            variant = implementation
        else:
            variant = Variant.of(implementation, is_async=is_async)
        return self._measure(n, variant, name, timeout, self._hooks)

    async def _measure(
        self,
        n: int,
        variant: Variant,
        name: str | None,
        timeout: float | None,
        hooks: Hooks,
    ) -> CpuStat:
        arg = await run_bounded("setup", timeout, call_maybe_async(hooks.setup, n))
        output, started, finished, cpu_before, cpu_after = await run_bounded(
            "execution", timeout, self._execute(variant, arg)
        )
        err = await run_bounded(
            "teardown", timeout, call_maybe_async(hooks.teardown, TeardownInfo(n=n, input=arg, output=output))
        )

        stat = CpuStat.from_readings(
            n,
            started=started,
            finished=finished,
            cpu_before=cpu_before,
            cpu_after=cpu_after,
            err=err,
        )
        if stat.err is not None:
            self._logger.warning("teardown-failed", variant=name, n=n, error=str(stat.err))
            try:
                hooks.on_teardown_failure(TeardownFailure(n=n, name=name, err=stat.err))
            except Exception as exc:
                self._logger.warning("teardown-hook-failed", variant=name, n=n, error=str(exc))
        return stat

    def _execute(self, variant: Variant, arg: Any) -> "asyncio.Future[Execution]":
        finished: asyncio.Future[Execution] = asyncio.get_running_loop().create_future()
        clock = self._clock
        cpu_time = self._cpu_time

        def done(output: Any = None) -> None:
            t2 = clock()
            c2 = cpu_time()
            # end of measured section; late or repeated calls are ignored
            if not finished.done():
                finished.set_result((output, t1, t2, c1, c2))

        # start of measured section: nothing else may happen in between
        t1 = clock()
        c1 = cpu_time()
        variant.start(arg, done)
        return finished

    # ------------------------------------------------------------------
    # Checking and comparing
    # ------------------------------------------------------------------

    def check(self, timeout_ms: float | None = None, n: int | None = None) -> Awaitable[dict[str, Any] | None]:
        """Runs every variant once to catch hangs, errors and wrong output.

        Resolves to `{name: reason}` for the variants that failed, or `None`
        when all of them passed. Variants are checked one after another.
        """

        timeout_ms = self._config.check_timeout_ms if timeout_ms is None else timeout_ms
        n = self._config.check_arg if n is None else n
        if not _is_positive_int(n):
            raise InvalidArgumentError(f"check requires a positive integer argument, got {n!r}")
        return self._check(timeout_ms, n, self._registry.snapshot(), self._hooks)

    async def _check(
        self,
        timeout_ms: float,
        n: int,
        variants: dict[str, Variant],
        hooks: Hooks,
    ) -> dict[str, Any] | None:
        bad: dict[str, Any] = {}
        for name, variant in variants.items():
            try:
                stat = await self._measure(n, variant, name, timeout_ms, hooks)
            except Exception as exc:
                bad[name] = str(exc) or type(exc).__name__
            else:
                if stat.err is not None:
                    bad[name] = stat.err
            if name in bad:
                self._logger.info("check-failed", variant=name, reason=str(bad[name]))
        return bad or None

    def compare(
        self,
        *,
        arg_list: list[int] | None = None,
        min_arg: int = 1,
        max_arg: int | None = None,
        max_time: float | None = None,
        repeat: int = 1,
        timeout: float | None = None,
        keep_going: bool = False,
    ) -> Awaitable[dict[str, list[CpuStat]]]:
        """Runs a sweep over every registered variant.

        Arguments come from `arg_list` or from the geometric progression
        `min_arg, ceil(min_arg * 4/3), ...` capped by `max_arg`. A variant is
        no longer scheduled once its total measured time exceeds `max_time`
        seconds. At least one of `arg_list`, `max_arg`, `max_time` is needed,
        anything else would never end.

        A probe failure aborts the whole sweep unless `keep_going` is set, in
        which case the failing variant is dropped and the rest carry on.
        Resolves to `{name: [CpuStat, ...]}` in execution order.
        """

        if arg_list is None and max_arg is None and max_time is None:
            raise ConfigurationError("One of max_arg, max_time or arg_list must be specified")
        if not _is_positive_int(repeat):
            raise ConfigurationError("repeat must be a positive integer")

        if arg_list is not None:
            args = list(arg_list)
            if not all(_is_positive_int(n) for n in args):
                raise ConfigurationError("arg_list must contain positive integers only")
        else:
            args = ArgProgression(min_arg, max_arg)

        timeout = self._config.probe_timeout_ms if timeout is None else timeout
        hooks = self._hooks

        def probe(n: int, variant: Variant, name: str) -> Awaitable[CpuStat]:
            return self._measure(n, variant, name, timeout, hooks)

        sweep = Sweep(
            self._registry.snapshot(),
            args,
            probe=probe,
            max_time=max_time,
            repeat=repeat,
            keep_going=keep_going,
            on_progress=hooks.on_progress,
        )
        return sweep.run()

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    def flatten_data(
        self,
        comparison: Mapping[str, Iterable[CpuStat | Mapping[str, Any]]],
        *,
        min_time: float | None = None,
        use_stat: str = "time",
        accumulator: Callable[[], Accumulator] = Univariate,
    ) -> FlatSeries:
        """Flattens `compare()` output, dropping points below the configured `min_time`."""

        min_time = self._config.min_time if min_time is None else min_time
        return flatten_data(comparison, min_time=min_time, use_stat=use_stat, accumulator=accumulator)

    def get_time_res(self, attempts: int = 15) -> float:
        """Average tick of this harness's clock, in seconds."""

        return measure_time_res(attempts, clock=self._clock)
