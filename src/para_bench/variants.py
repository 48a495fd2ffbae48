"""Candidate implementations and their registry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

Done = Callable[[Any], None]


class VariantKind(str, Enum):
    """How an implementation hands back its result."""

    DIRECT = "direct"
    CALLBACK = "callback"


@dataclass(frozen=True, slots=True)
class Variant:
    """An implementation together with its calling convention.

    `start(input, done)` is the single capability the probe engine relies on:
    it runs the implementation and arranges for `done(output)` to be called
    once the result exists, immediately for direct implementations or
    whenever the implementation decides for callback ones.
    """

    implementation: Callable[..., Any]
    kind: VariantKind = VariantKind.DIRECT

    @classmethod
    def of(cls, implementation: Callable[..., Any], *, is_async: bool = False) -> "Variant":
        return cls(implementation, VariantKind.CALLBACK if is_async else VariantKind.DIRECT)

    def start(self, arg: Any, done: Done) -> None:
        if self.kind is VariantKind.CALLBACK:
            self.implementation(arg, done)
        else:
            done(self.implementation(arg))


class VariantRegistry:
    """Named implementations under comparison.

    `snapshot()` keeps registration order; `names()` is sorted for display.
    """

    def __init__(self) -> None:
        self._variants: dict[str, Variant] = {}

    def register(self, name: str, implementation: Callable[..., Any] | None, *, is_async: bool = False) -> None:
        if not implementation:
            self.remove(name)
            return
        if not callable(implementation):
            raise TypeError("A variant must be callable (or None to remove it)")
        self._variants[name] = Variant.of(implementation, is_async=is_async)

    def remove(self, name: str) -> None:
        self._variants.pop(name, None)

    def names(self) -> list[str]:
        return sorted(self._variants)

    def snapshot(self) -> dict[str, Variant]:
        return dict(self._variants)
