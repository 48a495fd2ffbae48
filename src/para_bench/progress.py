"""Ready-made notification hooks that write to the structured log."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog
from structlog.stdlib import BoundLogger

from .models import ProgressSnapshot, TeardownFailure


@dataclass
class LoggingProgressReporter:
    """Progress hook logging every `every`-th completed probe."""

    every: int = 1
    logger: BoundLogger = field(default_factory=lambda: structlog.get_logger(__name__))

    def __call__(self, snapshot: ProgressSnapshot) -> None:
        if snapshot.count % max(self.every, 1):
            return
        fields = {
            "variant": snapshot.name,
            "n": snapshot.n,
            "count": snapshot.count,
            "time": snapshot.result.time,
            "cumulative_time": snapshot.cumulative_time,
        }
        if snapshot.percent is not None:
            fields["percentage"] = round(snapshot.percent, 1)
        self.logger.info("progress", **fields)


def log_teardown_failure(failure: TeardownFailure) -> None:
    structlog.get_logger(__name__).error("wrong-output", variant=failure.name, n=failure.n, error=str(failure.err))
