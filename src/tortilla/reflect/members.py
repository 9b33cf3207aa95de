from __future__ import annotations

import structlog

from tortilla.order_contract import OrderPolicy, ordered_or_sorted
from tortilla.reflect.adapter_contract import ReflectionAdapter
from tortilla.reflect.filters import MemberPredicate, current_member_filter
from tortilla.reflect.model import Member
from tortilla.reflect.python_adapter import PythonReflectionAdapter
from tortilla.reflect.resolve import resolve_class
from tortilla.types import type_name

log = structlog.get_logger()

_DEFAULT_ADAPTER = PythonReflectionAdapter()


def _member_order_key(member: Member) -> tuple[str, str]:
    return member.name, member.descriptor()


def members_of(
    class_handle: object,
    filter_predicate: MemberPredicate | None = None,
    *,
    adapter: ReflectionAdapter | None = None,
    order: OrderPolicy | str | None = None,
) -> list[Member]:
    """Reflect the wrappable members of a class.

    Without an explicit `filter_predicate` the predicate installed by
    `member_filter_scope` applies. Members keep declaration order unless the
    order policy asks for lexicographic `(name, descriptor)` order.
    """
    cls = resolve_class(class_handle)
    adapter = adapter or _DEFAULT_ADAPTER
    predicate = filter_predicate or current_member_filter()
    reflected = adapter.class_members(cls)
    members = [member for member in reflected if predicate(member)]
    log.debug(
        "reflect.members",
        cls=type_name(cls),
        reflected=len(reflected),
        kept=len(members),
    )
    return ordered_or_sorted(
        members,
        key=_member_order_key,
        policy=order,
        default=OrderPolicy.TRUST,
    )
