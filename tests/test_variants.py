"""Tests for variant registration."""

from __future__ import annotations

import pytest

from para_bench import ParaBench, Variant, VariantKind
from para_bench.variants import VariantRegistry


def test_list_is_sorted_and_chainable() -> None:
    bench = ParaBench().add("zeta", len).add_async("alpha", lambda x, done: done(x)).add("mid", str)
    assert bench.list() == ["alpha", "mid", "zeta"]


def test_registration_overwrites_and_none_removes() -> None:
    registry = VariantRegistry()
    registry.register("a", len)
    registry.register("a", lambda x, done: done(x), is_async=True)
    assert registry.snapshot()["a"].kind is VariantKind.CALLBACK

    registry.register("a", None)
    assert registry.snapshot() == {}


def test_iteration_follows_registration_order() -> None:
    registry = VariantRegistry()
    for name in ("b", "c", "a"):
        registry.register(name, len)
    registry.register("c", str)

    assert list(registry.snapshot()) == ["b", "c", "a"]
    assert registry.names() == ["a", "b", "c"]


def test_non_callable_is_rejected() -> None:
    with pytest.raises(TypeError):
        ParaBench().add("bad", 42)  # type: ignore[arg-type]


def test_remove_is_chainable_and_ignores_unknown_names() -> None:
    bench = ParaBench().add("a", len).remove("a").remove("missing")
    assert bench.list() == []


def test_variant_start_delivers_result_for_both_conventions() -> None:
    seen = []

    Variant.of(lambda x: x * 2).start(3, seen.append)
    Variant.of(lambda x, done: done(x + 1), is_async=True).start(3, seen.append)

    assert seen == [6, 4]
    assert Variant.of(len).kind is VariantKind.DIRECT
