"""Univariate sample accumulator used to reduce repeated measurements."""

from __future__ import annotations

from typing import Protocol

import numpy as np


class Accumulator(Protocol):
    """What the aggregator needs from a statistics container."""

    def add(self, *samples: float) -> "Accumulator":
        ...

    def count(self) -> int:
        ...

    def median(self) -> float:
        ...

    def mean(self) -> float:
        ...

    def clone(self, *, ltrim: int = 0, rtrim: int = 0, winsorize: bool = False) -> "Accumulator":
        ...


class Univariate:
    """Collects float samples and answers order statistics about them.

    `clone(ltrim=k, rtrim=m)` returns a copy without the `k` lowest and `m`
    highest samples. With `winsorize=True` those samples are kept but clamped
    to the lowest/highest surviving value instead, so the count is unchanged.
    Trimming everything away leaves an empty accumulator, or with
    `winsorize=True` one where every sample equals the median.
    """

    def __init__(self, samples: "list[float] | np.ndarray | None" = None) -> None:
        self._samples: list[float] = [float(x) for x in samples] if samples is not None else []

    def add(self, *samples: float) -> "Univariate":
        self._samples.extend(float(x) for x in samples)
        return self

    def count(self) -> int:
        return len(self._samples)

    def _array(self) -> np.ndarray:
        if not self._samples:
            raise ValueError("no samples collected")
        return np.asarray(self._samples, dtype=float)

    def median(self) -> float:
        return float(np.median(self._array()))

    def mean(self) -> float:
        return float(np.mean(self._array()))

    def clone(self, *, ltrim: int = 0, rtrim: int = 0, winsorize: bool = False) -> "Univariate":
        if ltrim < 0 or rtrim < 0:
            raise ValueError("trim counts must be non-negative")
        ordered = np.sort(np.asarray(self._samples, dtype=float))
        size = len(ordered)
        if ltrim + rtrim >= size:
            # nothing left in between: winsorizing collapses onto the median
            if winsorize and size:
                return Univariate(np.full(size, np.median(ordered)))
            return Univariate()
        kept = ordered[ltrim : size - rtrim]
        if winsorize:
            return Univariate(np.clip(ordered, kept[0], kept[-1]))
        return Univariate(kept)

    def __repr__(self) -> str:
        return f"Univariate(count={self.count()})"
