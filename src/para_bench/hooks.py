"""User hooks surrounding each probe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .models import ProgressSnapshot, TeardownFailure, TeardownInfo

SetupHook = Callable[[int], Any]
TeardownHook = Callable[[TeardownInfo], Any]
TeardownFailureHook = Callable[[TeardownFailure], None]
ProgressHook = Callable[[ProgressSnapshot], None]


def identity_setup(n: int) -> int:
    return n


def accept_all(_info: TeardownInfo) -> None:
    return None


def ignore(_event: object) -> None:
    return None


@dataclass(frozen=True, slots=True)
class Hooks:
    """Hooks applied to every probe of a harness.

    `setup` turns `n` into the input for the code under test and may return
    an awaitable. `teardown` inspects the output and returns a falsy value when
    it is fine, or a description of the problem (possibly via an awaitable).
    The two notification hooks are fire-and-forget.
    """

    setup: SetupHook = identity_setup
    teardown: TeardownHook = accept_all
    on_teardown_failure: TeardownFailureHook = ignore
    on_progress: ProgressHook = ignore

