from __future__ import annotations

import collections
from itertools import islice

import pytest

from tortilla.exceptions import ClassNotResolvable
from tortilla.order_contract import OrderPolicy
from tortilla.reflect import (
    MemberKind,
    PythonReflectionAdapter,
    ReflectionAdapter,
    members_of,
    resolve_class,
)
from tortilla.types import INT, LONG, DOUBLE
from tests.sample_classes import Calculator, Formatter, Greeter, NeedsKeyword, ScientificCalculator

_PREFIX = "tests.sample_classes"


def _descriptors(cls, **kwargs) -> list[str]:
    return [member.descriptor() for member in members_of(cls, **kwargs)]


def test_members_keep_declaration_order() -> None:
    assert _descriptors(Calculator) == [
        f"Calculator():{_PREFIX}.Calculator",
        f"Calculator(int):{_PREFIX}.Calculator",
        f"add({_PREFIX}.Calculator,int,int):int",
        f"add({_PREFIX}.Calculator,str,str):str",
        f"total({_PREFIX}.Calculator,int...):int",
        "scale(double,long):float",
        f"zero():{_PREFIX}.Calculator",
    ]


def test_members_sorted_policy_orders_by_name_then_descriptor() -> None:
    names = [member.name for member in members_of(Calculator, order=OrderPolicy.SORT)]
    assert names == sorted(names)


def test_member_kinds_and_receivers() -> None:
    members = {member.descriptor(): member for member in members_of(Calculator)}
    constructor = members[f"Calculator(int):{_PREFIX}.Calculator"]
    assert constructor.kind is MemberKind.CONSTRUCTOR
    assert constructor.is_static
    assert constructor.declared_types == (INT,)

    add = members[f"add({_PREFIX}.Calculator,int,int):int"]
    assert add.kind is MemberKind.METHOD
    assert not add.is_static
    assert add.declared_types == (Calculator, INT, INT)
    assert add.owner == f"{_PREFIX}.Calculator"

    scale = members["scale(double,long):float"]
    assert scale.is_static
    assert scale.declared_types == (DOUBLE, LONG)


def test_varargs_member_repeats_element_type() -> None:
    total = next(member for member in members_of(Calculator) if member.name == "total")
    assert total.is_varargs
    assert total.parameter_count == 1
    assert list(islice(total.parameter_types(), 4)) == [Calculator, INT, INT, INT]
    assert total.signature() == (f"{_PREFIX}.Calculator", "*int")


def test_fixed_member_parameter_types_end_with_the_prefix() -> None:
    scale = next(member for member in members_of(Calculator) if member.name == "scale")
    assert list(scale.parameter_types()) == [DOUBLE, LONG]


def test_static_overloads_are_separate_members() -> None:
    assert _descriptors(Formatter) == [
        f"Formatter():{_PREFIX}.Formatter",
        "render():str",
        "render(str,object,object...):str",
    ]


def test_class_without_initializer_gets_default_constructor() -> None:
    members = members_of(Greeter)
    assert members[0].kind is MemberKind.CONSTRUCTOR
    assert members[0].parameter_count == 0
    assert members[0].invoke([]).greet("you") == "hello you"


def test_inherited_members_keep_declaring_class() -> None:
    members = members_of(ScientificCalculator)
    power = next(member for member in members if member.name == "power")
    add = next(member for member in members if member.name == "add")
    assert power.declaring_class is ScientificCalculator
    assert add.declaring_class is Calculator
    assert add.invocation_path == f"{_PREFIX}.ScientificCalculator.add"


def test_required_keyword_only_members_are_skipped() -> None:
    names = [member.name for member in members_of(NeedsKeyword)]
    assert "configure" not in names
    assert "optional" in names


def test_object_members_are_excluded() -> None:
    names = {member.name for member in members_of(Greeter)}
    assert names == {"Greeter", "greet"}


def test_builtin_classes_reflect_method_descriptors() -> None:
    descriptors = _descriptors("str")
    assert "upper(str):object" in descriptors
    upper = next(member for member in members_of(str) if member.name == "upper")
    assert upper.invoke(["abc"]) == "ABC"


def test_explicit_filter_predicate_applies_after_adaptation() -> None:
    members = members_of(Calculator, lambda member: member.name == "add")
    assert [member.name for member in members] == ["add", "add"]


def test_adapter_contract() -> None:
    assert isinstance(PythonReflectionAdapter(), ReflectionAdapter)


def test_resolve_class_accepts_names_and_paths() -> None:
    assert resolve_class(str) is str
    assert resolve_class("int") is int
    assert resolve_class("collections.OrderedDict") is collections.OrderedDict
    assert resolve_class("tests.sample_classes.Calculator") is Calculator


@pytest.mark.parametrize(
    "handle",
    ["", "NoSuchBuiltin", "collections.NoSuchClass", "no_such_module.Thing", "os.path.join", 42],
)
def test_resolve_class_rejects_unknown(handle) -> None:
    with pytest.raises(ClassNotResolvable) as excinfo:
        resolve_class(handle)
    assert str(excinfo.value).startswith("Invalid class:")
