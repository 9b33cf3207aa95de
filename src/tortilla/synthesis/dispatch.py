from __future__ import annotations

from typing import Sequence

from tortilla.invariants import never
from tortilla.reflect.model import Member
from tortilla.synthesis.model import ClauseSet, Coercion, DispatchClause


def generate_fixed(
    arity: int,
    fixed_members: Sequence[Member],
    variadic_members: Sequence[Member] = (),
    *,
    coerce: Coercion | None = None,
) -> ClauseSet:
    """Clauses for exactly `arity` arguments.

    Fixed members are tried first, then the variadic members active at this
    arity; a variadic member at its own minimum matches with an empty tail.
    A single zero-argument candidate is invoked without a guard.
    """
    members = [*fixed_members, *variadic_members]
    if not members:
        never("fixed clause set without candidates", arity=arity)
    for member in fixed_members:
        if member.is_varargs or member.parameter_count != arity:
            never("fixed member does not take exactly the clause arity", arity=arity, member=member)
    for member in variadic_members:
        if not member.is_varargs or member.parameter_count > arity:
            never("variadic member is not active at the clause arity", arity=arity, member=member)
    guarded = not (arity == 0 and len(members) == 1)
    clauses = tuple(
        DispatchClause(member=member, arity=arity, guarded=guarded, coerce=coerce)
        for member in members
    )
    first = members[0]
    return ClauseSet(
        arity=arity,
        clauses=clauses,
        owner=first.owner,
        member_name=first.name,
    )


def generate_tail(
    min_arity: int,
    variadic_members: Sequence[Member],
    *,
    coerce: Coercion | None = None,
) -> ClauseSet:
    """Clauses for `min_arity` leading arguments plus any residual arguments."""
    if not variadic_members:
        never("tail clause set without variadic members", min_arity=min_arity)
    for member in variadic_members:
        if not member.is_varargs or member.parameter_count > min_arity:
            never("tail member cannot anchor at the clause arity", min_arity=min_arity, member=member)
    clauses = tuple(
        DispatchClause(member=member, arity=min_arity, tail=True, coerce=coerce)
        for member in variadic_members
    )
    first = variadic_members[0]
    return ClauseSet(
        arity=min_arity,
        clauses=clauses,
        owner=first.owner,
        member_name=first.name,
        tail=True,
    )
