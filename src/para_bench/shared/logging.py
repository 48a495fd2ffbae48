"""Structured logging setup."""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: int = logging.INFO, *, json: bool = False) -> None:
    """Routes harness logs through structlog on top of stdlib logging.

    Console rendering by default; `json=True` emits one JSON object per line,
    which is easier to collect from long unattended sweeps.
    """

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer(colors=False)

    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
