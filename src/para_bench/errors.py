"""Error taxonomy of the benchmarking harness."""

from __future__ import annotations


class ParaBenchError(Exception):
    """Base class for harness errors."""


class InvalidArgumentError(ParaBenchError, ValueError):
    """A probe was requested with an argument that is not a positive integer."""


class ConfigurationError(ParaBenchError, ValueError):
    """A sweep or aggregation was configured in a way that cannot run."""


class PhaseTimeoutError(ParaBenchError, TimeoutError):
    """One phase of a probe did not complete before its deadline."""

    def __init__(self, phase: str, timeout_ms: float) -> None:
        super().__init__(f"{phase.capitalize()} timed out after {timeout_ms:g} ms")
        self.phase = phase
        self.timeout_ms = timeout_ms
