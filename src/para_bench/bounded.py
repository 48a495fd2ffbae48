"""Deadline enforcement for a single asynchronous step."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, TypeVar

from .errors import PhaseTimeoutError

T = TypeVar("T")


async def run_bounded(phase: str, timeout_ms: float | None, work: Awaitable[T]) -> T:
    """Awaits `work`, giving up with `PhaseTimeoutError` after `timeout_ms`.

    A missing, zero or negative timeout means no deadline. Only an expired
    deadline is reported as `PhaseTimeoutError`; a `TimeoutError` raised by
    the work itself propagates as is.
    """

    if not timeout_ms or timeout_ms <= 0:
        return await work

    scope = asyncio.timeout(timeout_ms / 1000)
    try:
        async with scope:
            return await work
    except TimeoutError:
        if scope.expired():
            raise PhaseTimeoutError(phase, timeout_ms) from None
        raise


async def call_maybe_async(fun: Callable[..., Any], *args: Any) -> Any:
    """Calls `fun` and awaits the result when it is awaitable."""

    result = fun(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
