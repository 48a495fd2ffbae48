"""Pytest fixtures shared by the harness tests."""

from __future__ import annotations

import pytest

from para_bench.clock import no_cpu_time
from para_bench.engine import ParaBench

from tests.fakes import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_bench(clock: FakeClock) -> ParaBench:
    return ParaBench(clock=clock, cpu_time=no_cpu_time)
