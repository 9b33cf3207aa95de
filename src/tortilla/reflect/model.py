from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from itertools import chain, repeat
from typing import Callable, Iterator, Sequence

from tortilla.types import TypeRef, type_name


class MemberKind(str, Enum):
    CONSTRUCTOR = "constructor"
    METHOD = "method"


@dataclass(frozen=True)
class Member:
    """One reflected constructor or method signature.

    `declared_types` is the finite parameter prefix. For instance methods it
    starts with the declaring class: the receiver is passed as the first
    argument. When `varargs_type` is set the member also accepts any number
    of trailing arguments of that type.
    """

    name: str
    kind: MemberKind
    declared_types: tuple[TypeRef, ...]
    return_type: TypeRef
    declaring_class: type
    invocation_target: Callable[..., object] = field(compare=False)
    invocation_path: str = ""
    varargs_type: TypeRef | None = None
    is_static: bool = False

    @property
    def is_varargs(self) -> bool:
        return self.varargs_type is not None

    @property
    def parameter_count(self) -> int:
        return len(self.declared_types)

    @property
    def owner(self) -> str:
        return type_name(self.declaring_class)

    def parameter_types(self) -> Iterator[TypeRef]:
        if self.varargs_type is None:
            return iter(self.declared_types)
        return chain(self.declared_types, repeat(self.varargs_type))

    def descriptor(self) -> str:
        names = [type_name(t) for t in self.declared_types]
        if self.varargs_type is not None:
            names.append(type_name(self.varargs_type))
        suffix = "..." if self.varargs_type is not None else ""
        return f"{self.name}({','.join(names)}{suffix}):{type_name(self.return_type)}"

    def signature(self) -> tuple[str, ...]:
        names = [type_name(t) for t in self.declared_types]
        if self.varargs_type is not None:
            names.append(f"*{type_name(self.varargs_type)}")
        return tuple(names)

    def invoke(self, args: Sequence[object]) -> object:
        return self.invocation_target(*args)

    def __str__(self) -> str:
        return self.descriptor()
