"""Tests for sweeps: argument progression, budgets, ordering and progress."""

from __future__ import annotations

import asyncio
import math

import pytest

from para_bench import ConfigurationError, ParaBench, PhaseTimeoutError, ProgressSnapshot
from para_bench.shared.config import BenchConfig
from para_bench.sweep import ArgProgression, next_arg

from tests.fakes import FakeClock


def _fwd(n: int, done) -> None:
    total = 0
    for i in range(n):
        total += i
    done(total)


def _bwd(n: int, done) -> None:
    total = 0
    for i in range(n - 1, -1, -1):
        total += i
    done(total)


def test_compare_produces_one_series_per_variant() -> None:
    bench = ParaBench().add_async("fwd", _fwd).add_async("bwd", _bwd)

    data = asyncio.run(bench.compare(arg_list=[13, 21, 34, 55]))

    assert sorted(data) == ["bwd", "fwd"]
    assert [len(series) for series in data.values()] == [4, 4]
    assert [stat.n for stat in data["fwd"]] == [13, 21, 34, 55]


def test_compare_with_time_budget_only_terminates() -> None:
    bench = ParaBench().add_async("fwd", _fwd).add_async("bwd", _bwd)

    data = asyncio.run(bench.compare(max_time=0.025))

    assert sorted(data) == ["bwd", "fwd"]
    for series in data.values():
        assert series
        ns = [stat.n for stat in series]
        assert ns == sorted(ns)


def test_compare_refuses_an_unbounded_sweep() -> None:
    bench = ParaBench().add("noop", lambda n: n)
    with pytest.raises(ConfigurationError):
        bench.compare()
    with pytest.raises(ConfigurationError):
        bench.compare(min_arg=5, repeat=3)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_arg": 10, "repeat": 0},
        {"max_arg": 10, "min_arg": 0},
        {"arg_list": [1, -2]},
    ],
)
def test_compare_rejects_bad_options(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        ParaBench().compare(**kwargs)


def test_progression_grows_geometrically() -> None:
    assert list(ArgProgression(1, 100)) == [1, 2, 3, 4, 6, 8, 11, 15, 20, 27, 36, 48, 64, 86]


def test_progression_is_strictly_increasing_and_restartable() -> None:
    progression = ArgProgression(1, 10**6)
    first = list(progression)
    assert first == list(progression)
    for prev, cur in zip(first, first[1:]):
        assert cur > prev
        assert cur >= math.ceil(prev * 4 / 3)


def test_next_arg_is_exact_for_large_values() -> None:
    n = 3 * 10**20 + 1
    assert next_arg(n) == 4 * 10**20 + 2


def test_unbounded_progression_starts_at_min_arg() -> None:
    progression = iter(ArgProgression(5))
    assert [next(progression) for _ in range(4)] == [5, 7, 10, 14]


def test_exhausted_variant_is_dropped_while_others_continue(clock: FakeClock) -> None:
    bench = (
        ParaBench(clock=clock, cpu_time=lambda: None)
        .add("slow", lambda n: clock.advance(1.0))
        .add("fast", lambda n: clock.advance(0.01))
    )

    data = asyncio.run(bench.compare(arg_list=list(range(1, 11)), max_time=2.5))

    assert [stat.n for stat in data["slow"]] == [1, 2, 3]
    assert [stat.n for stat in data["fast"]] == list(range(1, 11))


def test_sweep_stops_when_every_variant_is_exhausted(clock: FakeClock) -> None:
    calls = []

    def impl(n: int) -> None:
        calls.append(n)
        clock.advance(n * 0.001)

    bench = ParaBench(clock=clock, cpu_time=lambda: None).add("only", impl)
    data = asyncio.run(bench.compare(max_time=0.04))

    assert calls == [stat.n for stat in data["only"]]
    total = sum(stat.time for stat in data["only"])
    assert total > 0.04
    assert total - data["only"][-1].time <= 0.04


def test_repeat_runs_consecutive_probes_per_argument(clock: FakeClock) -> None:
    order = []
    bench = (
        ParaBench(clock=clock, cpu_time=lambda: None)
        .add("a", lambda n: order.append(("a", n)))
        .add("b", lambda n: order.append(("b", n)))
    )

    data = asyncio.run(bench.compare(arg_list=[1, 2], repeat=2))

    assert order == [("a", 1), ("a", 1), ("b", 1), ("b", 1), ("a", 2), ("a", 2), ("b", 2), ("b", 2)]
    assert [stat.n for stat in data["a"]] == [1, 1, 2, 2]


def test_progress_snapshots(clock: FakeClock) -> None:
    snapshots: list[ProgressSnapshot] = []
    bench = (
        ParaBench(clock=clock, cpu_time=lambda: None)
        .add("a", lambda n: clock.advance(0.25))
        .add("b", lambda n: clock.advance(0.5))
        .progress(snapshots.append)
    )

    asyncio.run(bench.compare(arg_list=[1, 2], max_time=10))

    assert [(s.name, s.n, s.count) for s in snapshots] == [("a", 1, 1), ("b", 1, 2), ("a", 2, 3), ("b", 2, 4)]
    assert [s.cumulative_time for s in snapshots] == [0.25, 0.5, 0.5, 1.0]
    assert [s.total_time for s in snapshots] == [0.25, 0.75, 1.0, 1.5]
    assert all(s.max_time == 10 and s.total_max_time == 20 for s in snapshots)
    assert snapshots[-1].percent == pytest.approx(7.5)
    assert snapshots[0].result.time == 0.25


def test_sweep_yields_to_the_event_loop_between_probes() -> None:
    ticks = 0
    seen = []

    async def ticker() -> None:
        nonlocal ticks
        while True:
            ticks += 1
            await asyncio.sleep(0)

    async def scenario() -> None:
        task = asyncio.create_task(ticker())
        bench = ParaBench().add("noop", lambda n: n).progress(lambda s: seen.append(ticks))
        await bench.compare(arg_list=[1, 2, 3, 4, 5])
        task.cancel()

    asyncio.run(scenario())

    assert len(seen) == 5
    assert all(later > earlier for earlier, later in zip(seen, seen[1:]))


def test_timeout_aborts_the_sweep_by_default() -> None:
    bench = ParaBench().add("ok", lambda n: n).add_async("hang", lambda n, done: None)

    with pytest.raises(PhaseTimeoutError):
        asyncio.run(bench.compare(arg_list=[1, 2], timeout=5))


def test_keep_going_drops_failing_variants() -> None:
    bench = ParaBench().add("ok", lambda n: n).add_async("hang", lambda n, done: None)

    data = asyncio.run(bench.compare(arg_list=[1, 2, 3], timeout=5, keep_going=True))

    assert [stat.n for stat in data["ok"]] == [1, 2, 3]
    assert data["hang"] == []


def test_default_probe_timeout_comes_from_config() -> None:
    bench = ParaBench(config=BenchConfig(probe_timeout_ms=5)).add_async("hang", lambda n, done: None)

    with pytest.raises(PhaseTimeoutError):
        asyncio.run(bench.compare(arg_list=[1]))


def test_registry_changes_do_not_affect_a_running_sweep() -> None:
    bench = ParaBench()

    def late(n: int) -> int:
        return n

    bench.add("first", lambda n: bench.add("late", late))

    data = asyncio.run(bench.compare(arg_list=[1, 2]))

    assert list(data) == ["first"]
    assert bench.list() == ["first", "late"]
