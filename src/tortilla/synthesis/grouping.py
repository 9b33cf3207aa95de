from __future__ import annotations

from typing import Iterable

from tortilla.reflect.model import Member
from tortilla.synthesis.model import ArityBucket, ArityGroup


def group_by_arity(members: Iterable[Member]) -> ArityGroup:
    """Partition members by minimum arity, ascending.

    Discovery order is kept inside each bucket; it decides which overload
    wins when several guards match.
    """
    fixed: dict[int, list[Member]] = {}
    variadic: dict[int, list[Member]] = {}
    for member in members:
        target = variadic if member.is_varargs else fixed
        target.setdefault(member.parameter_count, []).append(member)
    arities = sorted(set(fixed) | set(variadic))
    return ArityGroup(
        buckets=tuple(
            ArityBucket(
                arity=arity,
                fixed=tuple(fixed.get(arity, ())),
                variadic=tuple(variadic.get(arity, ())),
            )
            for arity in arities
        )
    )
