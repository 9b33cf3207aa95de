from __future__ import annotations

import pytest

from tortilla.exceptions import NeverThrown, OverloadResolutionError
from tortilla.synthesis.coercion import coerce
from tortilla.synthesis.dispatch import generate_fixed, generate_tail
from tortilla.synthesis.grouping import group_by_arity
from tortilla.types import DOUBLE, INT, LONG, Integer
from tests.member_helpers import make_member as _member


def test_group_by_arity_splits_fixed_and_variadic() -> None:
    a = _member("f", [str])
    b = _member("f", [str], varargs=str)
    c = _member("f", [])
    d = _member("f", [str], varargs=int)
    grouped = group_by_arity([a, b, c, d])
    assert list(grouped) == [0, 1]
    assert grouped[0].fixed == (c,)
    assert grouped[1].fixed == (a,)
    assert grouped[1].variadic == (b, d)
    assert grouped.variadics == (b, d)


def test_fixed_clauses_try_fixed_members_before_variadics() -> None:
    fixed = _member("f", [str], target=lambda value: "fixed")
    variadic = _member("f", [str], varargs=str, target=lambda *args: "variadic")
    clause_set = generate_fixed(1, [fixed], [variadic])
    assert [clause.member for clause in clause_set.clauses] == [fixed, variadic]
    assert clause_set.dispatch(["x"]) == "fixed"


def test_variadic_at_minimum_gets_empty_tail() -> None:
    variadic = _member("f", [str], varargs=int, target=lambda head, *rest: (head, rest))
    clause_set = generate_fixed(1, [], [variadic])
    assert clause_set.dispatch(["x"]) == ("x", ())


def test_single_zero_arity_candidate_is_unguarded() -> None:
    clause_set = generate_fixed(0, [_member("f", [])])
    assert not clause_set.clauses[0].guarded
    several = generate_fixed(0, [_member("f", [])], [_member("f", [], varargs=str)])
    assert all(clause.guarded for clause in several.clauses)


def test_guards_use_boxed_types_and_first_match_wins() -> None:
    wide = _member("f", [object], target=lambda value: "object")
    narrow = _member("f", [str], target=lambda value: "str")
    clause_set = generate_fixed(1, [wide, narrow])
    assert clause_set.dispatch(["x"]) == "object"


def test_long_and_double_bind_with_casts() -> None:
    member = _member("f", [LONG, DOUBLE], target=lambda a, b: (type(a), type(b)))
    clause_set = generate_fixed(2, [member])
    assert clause_set.dispatch([Integer(1), 2.5]) == (int, float)


def test_coercion_applies_before_guard_and_invocation() -> None:
    member = _member("f", [INT], target=lambda value: value)
    plain = generate_fixed(1, [member])
    coerced = generate_fixed(1, [member], coerce=coerce)
    with pytest.raises(OverloadResolutionError):
        plain.dispatch([7])
    result = coerced.dispatch([7])
    assert type(result) is Integer
    assert result == 7


def test_tail_packs_residual_arguments() -> None:
    member = _member("f", [str], varargs=LONG, target=lambda head, *rest: (head, rest))
    clause_set = generate_tail(1, [member])
    assert clause_set.accepts(5)
    assert not clause_set.accepts(0)
    assert clause_set.dispatch(["x", 1, 2, 3]) == ("x", (1, 2, 3))
    with pytest.raises(OverloadResolutionError):
        clause_set.dispatch(["x", 1, "two"])


def test_tail_anchored_above_minimum_passes_fixed_slots_as_varargs() -> None:
    member = _member("f", [str], varargs=int, target=lambda head, *rest: (head, rest))
    clause_set = generate_tail(3, [member])
    assert clause_set.dispatch(["x", 1, 2, 3]) == ("x", (1, 2, 3))


def test_no_match_reports_argument_types_in_order() -> None:
    clause_set = generate_fixed(2, [_member("f", [str, str])])
    with pytest.raises(OverloadResolutionError) as excinfo:
        clause_set.dispatch([1, "x"])
    error = excinfo.value
    assert error.arg_types == ("int", "str")
    assert str(error) == "Unrecognised types for tests.member_helpers.Host.f: int, str"


def test_invalid_clause_inputs_are_invariant_violations() -> None:
    with pytest.raises(NeverThrown):
        generate_fixed(1, [])
    with pytest.raises(NeverThrown):
        generate_fixed(2, [_member("f", [str])])
    with pytest.raises(NeverThrown):
        generate_tail(0, [_member("f", [str])])
