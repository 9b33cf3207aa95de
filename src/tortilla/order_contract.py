from __future__ import annotations

import os
from contextlib import contextmanager
from contextvars import ContextVar, Token
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, TypeVar

from tortilla.invariants import never


T = TypeVar("T")

_ORDER_POLICY_ENV = "TORTILLA_ORDER_POLICY"
_ORDER_POLICY_CONTEXT: ContextVar["OrderPolicy | None"] = ContextVar(
    "tortilla_order_policy",
    default=None,
)


class OrderPolicy(str, Enum):
    SORT = "sort"
    TRUST = "trust"


_POLICY_ALIASES: dict[str, OrderPolicy] = {
    "sorted": OrderPolicy.SORT,
    "declared": OrderPolicy.TRUST,
}


def ordered_or_sorted(
    values: Iterable[T],
    *,
    key: Callable[[T], Any] | None = None,
    policy: OrderPolicy | str | None = None,
    default: OrderPolicy = OrderPolicy.SORT,
) -> list[T]:
    """Return deterministic order under the resolved policy.

    - `OrderPolicy.SORT`: always apply sorting.
    - `OrderPolicy.TRUST`: keep caller order.

    Policy resolution precedence:
    1. explicit `policy`
    2. context policy (`order_policy(...)`)
    3. `TORTILLA_ORDER_POLICY`
    4. `default`
    """
    items = list(values)
    if _resolve_policy(policy=policy, default=default) is OrderPolicy.SORT:
        return sorted(items, key=key)
    return items


def _resolve_policy(
    *,
    policy: OrderPolicy | str | None,
    default: OrderPolicy,
) -> OrderPolicy:
    if policy is not None:
        return normalize_policy(policy)
    context_policy = _ORDER_POLICY_CONTEXT.get()
    if context_policy is not None:
        return context_policy
    raw = os.environ.get(_ORDER_POLICY_ENV, "").strip()
    if raw:
        return normalize_policy(raw)
    return default


def normalize_policy(policy: OrderPolicy | str) -> OrderPolicy:
    if isinstance(policy, OrderPolicy):
        return policy
    value = str(policy).strip().lower()
    if value in _POLICY_ALIASES:
        return _POLICY_ALIASES[value]
    try:
        return OrderPolicy(value)
    except ValueError:
        never("unknown order policy", policy=policy)


def get_order_policy(default: OrderPolicy = OrderPolicy.SORT) -> OrderPolicy:
    return _resolve_policy(policy=None, default=default)


def set_order_policy(policy: OrderPolicy | str) -> Token[OrderPolicy | None]:
    return _ORDER_POLICY_CONTEXT.set(normalize_policy(policy))


def reset_order_policy(token: Token[OrderPolicy | None]) -> None:
    _ORDER_POLICY_CONTEXT.reset(token)


@contextmanager
def order_policy(policy: OrderPolicy | str) -> Iterator[None]:
    token = set_order_policy(policy)
    try:
        yield
    finally:
        reset_order_policy(token)
