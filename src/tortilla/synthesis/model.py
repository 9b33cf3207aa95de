from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from itertools import islice
from typing import Callable, Iterator, Sequence, TypeAlias

from tortilla.exceptions import OverloadResolutionError
from tortilla.order_contract import OrderPolicy
from tortilla.reflect.filters import MemberPredicate
from tortilla.reflect.model import Member
from tortilla.types import TypeRef, binding_cast, boxed, is_instance

Coercion: TypeAlias = Callable[[object, type], object]


@dataclass(frozen=True)
class ArityBucket:
    arity: int
    fixed: tuple[Member, ...] = ()
    variadic: tuple[Member, ...] = ()


@dataclass(frozen=True)
class ArityGroup(Mapping[int, ArityBucket]):
    buckets: tuple[ArityBucket, ...] = ()

    def __getitem__(self, arity: int) -> ArityBucket:
        for bucket in self.buckets:
            if bucket.arity == arity:
                return bucket
        raise KeyError(arity)

    def __iter__(self) -> Iterator[int]:
        return (bucket.arity for bucket in self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)

    @property
    def variadics(self) -> tuple[Member, ...]:
        return tuple(member for bucket in self.buckets for member in bucket.variadic)


@dataclass(frozen=True)
class DispatchClause:
    """One (type guard, invocation) pair.

    In tail mode the clause covers `arity` leading arguments plus any number
    of residual arguments of the member's varargs element type.
    """

    member: Member
    arity: int
    tail: bool = False
    guarded: bool = True
    coerce: Coercion | None = field(default=None, compare=False)

    def guard_types(self) -> tuple[TypeRef, ...]:
        return tuple(islice(self.member.parameter_types(), self.arity))

    def coerced(self, value: object, t: TypeRef) -> object:
        if self.coerce is None:
            return value
        return self.coerce(value, boxed(t))

    def bind(self, value: object, t: TypeRef) -> object:
        value = self.coerced(value, t)
        cast = binding_cast(t)
        return value if cast is None else cast(value)

    def matches(self, args: Sequence[object]) -> bool:
        if not self.guarded:
            return True
        for value, t in zip(args[: self.arity], self.guard_types()):
            if not is_instance(self.coerced(value, t), t):
                return False
        if self.tail:
            element = self.member.varargs_type
            return all(
                is_instance(self.coerced(value, element), element)
                for value in args[self.arity :]
            )
        return True

    def invoke(self, args: Sequence[object]) -> object:
        member = self.member
        count = member.parameter_count
        bound = [self.bind(value, t) for value, t in zip(args[:count], member.declared_types)]
        if member.varargs_type is not None:
            element = member.varargs_type
            bound.extend(self.coerced(value, element) for value in args[count:])
        return member.invoke(bound)


@dataclass(frozen=True)
class ClauseSet:
    arity: int
    clauses: tuple[DispatchClause, ...]
    owner: str
    member_name: str
    tail: bool = False

    def accepts(self, count: int) -> bool:
        if self.tail:
            return count >= self.arity
        return count == self.arity

    def dispatch(self, args: Sequence[object]) -> object:
        for clause in self.clauses:
            if clause.matches(args):
                return clause.invoke(args)
        raise OverloadResolutionError(self.owner, self.member_name, args)


@dataclass(frozen=True)
class RoutineSpec:
    name: str
    identifier: str
    member_name: str
    owner: str
    # (parameter type names, return type name) per member
    declared_signatures: tuple[tuple[tuple[str, ...], str], ...]
    clause_sets: tuple[ClauseSet, ...]

    @property
    def tail(self) -> ClauseSet | None:
        if self.clause_sets and self.clause_sets[-1].tail:
            return self.clause_sets[-1]
        return None

    @property
    def fixed_arities(self) -> tuple[int, ...]:
        return tuple(clause_set.arity for clause_set in self.clause_sets if not clause_set.tail)

    def clause_set_for(self, count: int) -> ClauseSet | None:
        for clause_set in self.clause_sets:
            if not clause_set.tail and clause_set.arity == count:
                return clause_set
        tail = self.tail
        if tail is not None and tail.accepts(count):
            return tail
        return None

    def dispatch(self, args: Sequence[object]) -> object:
        clause_set = self.clause_set_for(len(args))
        if clause_set is None:
            raise OverloadResolutionError(
                self.owner,
                self.member_name,
                args,
                reason=f"Wrong number of arguments ({len(args)}) for",
            )
        return clause_set.dispatch(args)


@dataclass(frozen=True)
class WrapOptions:
    prefix: str = ""
    coerce: Coercion | None = None
    filter_predicate: MemberPredicate | None = None
    members_only: bool = False
    order: OrderPolicy | str | None = None
