"""Member filters over descriptor strings.

A descriptor looks like ``substring(str,int,int):str``; variadic members end
their parameter list with ``...``. Filters match with `re.search`, so an
include pattern of ``^append\\(`` selects every ``append`` overload.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Callable, Iterator

from tortilla.exceptions import InvalidFilterPattern
from tortilla.reflect.model import Member

MemberPredicate = Callable[[Member], bool]

_MEMBER_FILTER: ContextVar[MemberPredicate | None] = ContextVar(
    "tortilla_member_filter",
    default=None,
)


def compile_pattern(pattern: str | re.Pattern[str] | None) -> re.Pattern[str] | None:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidFilterPattern(pattern, str(exc)) from exc


def always(_member: Member) -> bool:
    return True


@dataclass(frozen=True)
class MemberFilter:
    include: re.Pattern[str] | None = None
    exclude: re.Pattern[str] | None = None

    @classmethod
    def from_patterns(
        cls,
        include: str | re.Pattern[str] | None = None,
        exclude: str | re.Pattern[str] | None = None,
    ) -> "MemberFilter":
        return cls(include=compile_pattern(include), exclude=compile_pattern(exclude))

    def __call__(self, member: Member) -> bool:
        descriptor = member.descriptor()
        if self.include is not None and self.include.search(descriptor) is None:
            return False
        if self.exclude is not None and self.exclude.search(descriptor) is not None:
            return False
        return True


def current_member_filter() -> MemberPredicate:
    return _MEMBER_FILTER.get() or always


def set_member_filter(predicate: MemberPredicate | None) -> Token[MemberPredicate | None]:
    return _MEMBER_FILTER.set(predicate)


def reset_member_filter(token: Token[MemberPredicate | None]) -> None:
    _MEMBER_FILTER.reset(token)


@contextmanager
def member_filter_scope(predicate: MemberPredicate | None) -> Iterator[None]:
    token = set_member_filter(predicate)
    try:
        yield
    finally:
        reset_member_filter(token)
