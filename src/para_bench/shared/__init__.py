"""Shared modules: configuration and logging."""

from .config import BenchConfig
from .logging import configure_logging

__all__ = [
	"BenchConfig",
	"configure_logging",
]
