"""Parametric micro-benchmarking.

This package provides:
- single measurements of user code for a size parameter `n` (`ParaBench.probe`),
- sweeps comparing several implementations over a range of `n` (`ParaBench.compare`),
- reduction of the noisy raw samples into plot-ready series (`flatten_data`).
"""

from .aggregate import FlatSeries, flatten_data
from .clock import get_time_res
from .engine import ParaBench
from .errors import ConfigurationError, InvalidArgumentError, ParaBenchError, PhaseTimeoutError
from .hooks import Hooks
from .models import CpuStat, CpuTimes, ProgressSnapshot, TeardownFailure, TeardownInfo
from .stats import Univariate
from .variants import Variant, VariantKind

__all__ = [
    "ConfigurationError",
    "CpuStat",
    "CpuTimes",
    "FlatSeries",
    "Hooks",
    "InvalidArgumentError",
    "ParaBench",
    "ParaBenchError",
    "PhaseTimeoutError",
    "ProgressSnapshot",
    "TeardownFailure",
    "TeardownInfo",
    "Univariate",
    "Variant",
    "VariantKind",
    "flatten_data",
    "get_time_res",
]
