from __future__ import annotations

import collections.abc
import typing
from typing import Annotated, Any, Optional

import pytest

from tortilla import types as t


def test_boxed_maps_primitives_to_reference_classes() -> None:
    assert t.boxed(t.INT) is t.Integer
    assert t.boxed(t.LONG) is int
    assert t.boxed(t.DOUBLE) is float
    assert t.boxed(t.FLOAT) is t.Float
    assert t.boxed(t.BOOLEAN) is bool
    assert t.boxed(t.CHAR) is t.Character
    assert t.boxed(t.VOID) is object
    assert t.boxed(str) is str


def test_binding_cast_applies_to_long_and_double_only() -> None:
    assert t.binding_cast(t.LONG) is int
    assert t.binding_cast(t.DOUBLE) is float
    assert t.binding_cast(t.INT) is None
    assert t.binding_cast(str) is None


def test_is_instance_uses_boxed_type() -> None:
    assert t.is_instance(t.Integer(3), t.INT)
    assert not t.is_instance(3, t.INT)
    assert t.is_instance(3, t.LONG)
    assert t.is_instance(t.Integer(3), t.LONG)
    assert t.is_instance("x", object)
    assert t.is_instance(None, object)
    assert t.is_instance(None, t.VOID)
    assert not t.is_instance(None, str)
    assert not t.is_instance(None, t.LONG)


def test_is_instance_rejects_bool_for_numeric_types() -> None:
    assert not t.is_instance(True, t.LONG)
    assert not t.is_instance(False, t.DOUBLE)
    assert t.is_instance(True, t.BOOLEAN)
    assert t.is_instance(True, object)


def test_type_name_renders_builtins_bare() -> None:
    assert t.type_name(str) == "str"
    assert t.type_name(t.LONG) == "long"
    assert t.type_name(t.Integer) == "tortilla.types.Integer"


def test_character_requires_one_code_point() -> None:
    assert t.Character("a") == "a"
    with pytest.raises(ValueError):
        t.Character("ab")


def test_from_annotation() -> None:
    assert t.from_annotation(None) is t.VOID
    assert t.from_annotation(Any) is object
    assert t.from_annotation(t.jint) is t.INT
    assert t.from_annotation(Annotated[str, "doc"]) is str
    assert t.from_annotation(list[int]) is list
    assert t.from_annotation(typing.List[int]) is list
    assert t.from_annotation(Optional[int]) is object
    assert t.from_annotation(int | str) is object
    assert t.from_annotation("unresolved") is object


def test_from_annotation_keeps_only_checkable_protocols() -> None:
    from tests.sample_classes import Named, Shape

    assert t.from_annotation(Shape) is object
    assert t.from_annotation(Named) is Named
    assert t.from_annotation(typing.Iterable[int]) is collections.abc.Iterable
