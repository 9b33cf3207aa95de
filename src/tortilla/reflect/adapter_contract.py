from __future__ import annotations

from typing import Protocol, runtime_checkable

from tortilla.reflect.model import Member


@runtime_checkable
class ReflectionAdapter(Protocol):
    platform_id: str

    def class_members(self, cls: type) -> list[Member]: ...

    def constructors(self, cls: type) -> list[Member]: ...

    def methods(self, cls: type) -> list[Member]: ...
