"""Reflection of foreign classes into uniform member records."""

from tortilla.reflect.adapter_contract import ReflectionAdapter
from tortilla.reflect.filters import (
    MemberFilter,
    MemberPredicate,
    compile_pattern,
    current_member_filter,
    member_filter_scope,
)
from tortilla.reflect.members import members_of
from tortilla.reflect.model import Member, MemberKind
from tortilla.reflect.python_adapter import PythonReflectionAdapter
from tortilla.reflect.resolve import resolve_class

__all__ = [
    "Member",
    "MemberFilter",
    "MemberKind",
    "MemberPredicate",
    "PythonReflectionAdapter",
    "ReflectionAdapter",
    "compile_pattern",
    "current_member_filter",
    "member_filter_scope",
    "members_of",
    "resolve_class",
]
