from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterator, Sequence

import structlog

from tortilla.invariants import never, proof_mode
from tortilla.order_contract import OrderPolicy, get_order_policy
from tortilla.reflect.adapter_contract import ReflectionAdapter
from tortilla.reflect.filters import current_member_filter
from tortilla.reflect.members import members_of
from tortilla.reflect.model import Member
from tortilla.reflect.resolve import resolve_class
from tortilla.synthesis.dispatch import generate_fixed, generate_tail
from tortilla.synthesis.grouping import group_by_arity
from tortilla.synthesis.model import ClauseSet, RoutineSpec, WrapOptions
from tortilla.synthesis.naming import python_identifier, transform_name, unique_identifier
from tortilla.types import type_name

log = structlog.get_logger()

_DEFAULT_OPTIONS = WrapOptions()


def assemble_routine(
    name: str,
    members: Sequence[Member],
    options: WrapOptions = _DEFAULT_OPTIONS,
    *,
    routine_name: str | None = None,
    identifier: str | None = None,
) -> RoutineSpec:
    """Build the dispatch routine for every member sharing `name`.

    Arities are walked in ascending order. While variadic members are active,
    arities with no member of their own are filled so that they still reach
    the variadics. A final tail set anchored at the last emitted arity covers
    every larger argument count.
    """
    if not members:
        never("routine without members", name=name)
    coerce = options.coerce
    grouped = group_by_arity(members)
    clause_sets: list[ClauseSet] = []
    variadics: list[Member] = []
    last_arity = -1
    for bucket in grouped.values():
        while variadics and bucket.arity > last_arity + 1:
            last_arity += 1
            clause_sets.append(generate_fixed(last_arity, (), tuple(variadics), coerce=coerce))
        variadics.extend(bucket.variadic)
        clause_sets.append(
            generate_fixed(bucket.arity, bucket.fixed, tuple(variadics), coerce=coerce)
        )
        last_arity = bucket.arity
    if variadics:
        clause_sets.append(generate_tail(max(last_arity, 0), tuple(variadics), coerce=coerce))
    routine_name = routine_name or f"{options.prefix}{transform_name(name)}"
    spec = RoutineSpec(
        name=routine_name,
        identifier=identifier or python_identifier(routine_name),
        member_name=name,
        owner=members[0].owner,
        declared_signatures=tuple(
            (member.signature(), type_name(member.return_type)) for member in members
        ),
        clause_sets=tuple(clause_sets),
    )
    if proof_mode():
        verify_routine(spec, members)
    return spec


def verify_routine(spec: RoutineSpec, members: Sequence[Member]) -> None:
    """Check that every reachable argument count has a clause set."""
    arities = [clause_set.arity for clause_set in spec.clause_sets if not clause_set.tail]
    if arities != sorted(set(arities)):
        never("fixed clause sets out of order", routine=spec.name, arities=arities)
    for member in members:
        reachable = spec.clause_set_for(member.parameter_count)
        if reachable is None:
            never("member arity has no clause set", routine=spec.name, member=member)
        if member.is_varargs:
            beyond = max([member.parameter_count, *arities]) + 1
            if spec.clause_set_for(beyond) is None:
                never("variadic member has no tail clause set", routine=spec.name, member=member)
            for count in range(member.parameter_count, beyond):
                if spec.clause_set_for(count) is None:
                    never("arity gap below variadic tail", routine=spec.name, arity=count)


def _group_by_name(members: Sequence[Member]) -> dict[str, list[Member]]:
    grouped: dict[str, list[Member]] = {}
    for member in members:
        grouped.setdefault(member.name, []).append(member)
    return grouped


def assemble_class(
    class_handle: object,
    options: WrapOptions = _DEFAULT_OPTIONS,
    *,
    adapter: ReflectionAdapter | None = None,
) -> tuple[RoutineSpec, ...]:
    cls = resolve_class(class_handle)
    members = members_of(
        cls,
        options.filter_predicate,
        adapter=adapter,
        order=options.order,
    )
    routines: list[RoutineSpec] = []
    identifiers: set[str] = set()
    for name, group in _group_by_name(members).items():
        routine_name = f"{options.prefix}{transform_name(name)}"
        identifier = unique_identifier(python_identifier(routine_name), identifiers)
        identifiers.add(identifier)
        routines.append(
            assemble_routine(
                name,
                group,
                options,
                routine_name=routine_name,
                identifier=identifier,
            )
        )
    log.debug(
        "synthesis.class_assembled",
        cls=type_name(cls),
        members=len(members),
        routines=len(routines),
    )
    return tuple(routines)


@dataclass(frozen=True)
class MemberDescriptors:
    """Lazy, restartable view of a class's member descriptor strings."""

    cls: type
    options: WrapOptions = _DEFAULT_OPTIONS
    adapter: ReflectionAdapter | None = field(default=None, compare=False)

    def __iter__(self) -> Iterator[str]:
        for member in members_of(
            self.cls,
            self.options.filter_predicate,
            adapter=self.adapter,
            order=self.options.order,
        ):
            yield member.descriptor()


def member_descriptors(
    class_handle: object,
    options: WrapOptions = _DEFAULT_OPTIONS,
    *,
    adapter: ReflectionAdapter | None = None,
) -> MemberDescriptors:
    # Capture ambient filter and order now; iteration may happen outside their scope.
    predicate = options.filter_predicate or current_member_filter()
    order = options.order or get_order_policy(OrderPolicy.TRUST)
    return MemberDescriptors(
        cls=resolve_class(class_handle),
        options=replace(options, filter_predicate=predicate, order=order),
        adapter=adapter,
    )


def generate(
    class_handle: object,
    options: WrapOptions = _DEFAULT_OPTIONS,
    *,
    adapter: ReflectionAdapter | None = None,
) -> MemberDescriptors | tuple[RoutineSpec, ...]:
    if options.members_only:
        return member_descriptors(class_handle, options, adapter=adapter)
    return assemble_class(class_handle, options, adapter=adapter)
