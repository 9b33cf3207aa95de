from __future__ import annotations

import pytest

from tortilla.synthesis.coercion import callable_path, coerce, identity, resolve_callable
from tortilla.types import Byte, Float, Integer, Short


def test_coerce_numbers_to_integer_and_float() -> None:
    assert type(coerce(1, Integer)) is Integer
    assert coerce(1.9, Integer) == 1
    assert type(coerce(3, Float)) is Float
    assert coerce(3, Float) == 3.0
    assert type(coerce(300, Short)) is Short
    assert type(coerce(7, Byte)) is Byte


def test_coerce_leaves_other_targets_alone() -> None:
    assert coerce(1, int) == 1
    assert coerce(1.5, float) == 1.5
    assert coerce(1, str) == 1
    assert coerce("1", Integer) == "1"
    value = object()
    assert coerce(value, Integer) is value


def test_coerce_does_not_turn_bools_into_numbers() -> None:
    assert coerce(True, Integer) is True


def test_coerce_leaves_non_finite_floats_for_the_guard_to_reject() -> None:
    nan = float("nan")
    assert coerce(nan, Integer) is nan
    assert coerce(float("inf"), Short) == float("inf")
    assert type(coerce(float("-inf"), Byte)) is float
    assert type(coerce(nan, Float)) is Float


def test_identity() -> None:
    value = object()
    assert identity(value, Integer) is value


def test_callable_path_requires_importable_function() -> None:
    assert callable_path(coerce) == "tortilla.synthesis.coercion.coerce"

    def local(value, target):
        return value

    with pytest.raises(ValueError):
        callable_path(local)


def test_resolve_callable_accepts_paths_and_callables() -> None:
    assert resolve_callable(None) is None
    assert resolve_callable(coerce) is coerce
    assert resolve_callable("tortilla.synthesis.coercion.coerce") is coerce
    assert resolve_callable("tortilla.synthesis.coercion:identity") is identity


@pytest.mark.parametrize("value", ["", "nodots", 42])
def test_resolve_callable_rejects_bad_values(value) -> None:
    with pytest.raises((TypeError, ValueError)):
        resolve_callable(value)


def test_resolve_callable_rejects_non_callables() -> None:
    with pytest.raises(TypeError):
        resolve_callable("tortilla.types.INT")
