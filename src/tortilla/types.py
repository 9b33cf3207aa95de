"""Target platform type system.

Reference types are plain Python classes. Primitive types are `Primitive`
values; they only appear in reflected signatures, never at runtime. Every
primitive has a boxed counterpart used for instance-of tests. `Long`,
`Double` and `Boolean` are the builtin `int`, `float` and `bool`, so
literals route to them without coercion. `Byte`, `Short`, `Integer`,
`Float` and `Character` are distinct subclasses that a coercion hook has to
produce explicitly.

Annotate primitive parameters with the `j*` aliases::

    def substring(self, begin: jint, end: jint) -> str: ...
"""

from __future__ import annotations

import inspect
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Callable, TypeAlias, Union


@dataclass(frozen=True)
class Primitive:
    name: str

    def __str__(self) -> str:
        return self.name


BYTE = Primitive("byte")
SHORT = Primitive("short")
INT = Primitive("int")
LONG = Primitive("long")
FLOAT = Primitive("float")
DOUBLE = Primitive("double")
CHAR = Primitive("char")
BOOLEAN = Primitive("boolean")
VOID = Primitive("void")

class Byte(int):
    def __repr__(self) -> str:
        return f"Byte({int(self)})"


class Short(int):
    def __repr__(self) -> str:
        return f"Short({int(self)})"


class Integer(int):
    def __repr__(self) -> str:
        return f"Integer({int(self)})"


class Float(float):
    def __repr__(self) -> str:
        return f"Float({float(self)})"


class Character(str):
    def __new__(cls, value: str) -> "Character":
        if len(value) != 1:
            raise ValueError(f"Character needs exactly one code point, got {value!r}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Character({str(self)!r})"


Long = int
Double = float
Boolean = bool
Object = object
String = str

TypeRef: TypeAlias = Union[type, Primitive]

_BOXED: dict[Primitive, type] = {
    BYTE: Byte,
    SHORT: Short,
    INT: Integer,
    LONG: Long,
    FLOAT: Float,
    DOUBLE: Double,
    CHAR: Character,
    BOOLEAN: Boolean,
    VOID: Object,
}

# long and double keep their primitive form as a local binding type.
_BINDING_CASTS: dict[Primitive, Callable[[object], object]] = {
    LONG: int,
    DOUBLE: float,
}

_NUMERIC_BOXES: tuple[type, ...] = (int, float)

jbyte = Annotated[int, BYTE]
jshort = Annotated[int, SHORT]
jint = Annotated[int, INT]
jlong = Annotated[int, LONG]
jfloat = Annotated[float, FLOAT]
jdouble = Annotated[float, DOUBLE]
jchar = Annotated[str, CHAR]
jboolean = Annotated[bool, BOOLEAN]


def boxed(t: TypeRef) -> type:
    if isinstance(t, Primitive):
        return _BOXED[t]
    return t


def binding_cast(t: TypeRef) -> Callable[[object], object] | None:
    if isinstance(t, Primitive):
        return _BINDING_CASTS.get(t)
    return None


def is_instance(value: object, t: TypeRef) -> bool:
    target = boxed(t)
    if (
        isinstance(value, bool)
        and target is not bool
        and target is not object
        and issubclass(target, _NUMERIC_BOXES)
    ):
        return False
    return isinstance(value, target)


def type_name(t: TypeRef) -> str:
    if isinstance(t, Primitive):
        return t.name
    module = getattr(t, "__module__", "builtins")
    qualname = getattr(t, "__qualname__", getattr(t, "__name__", repr(t)))
    if module == "builtins":
        return qualname
    return f"{module}.{qualname}"


def _checkable(t: type) -> type:
    # isinstance() raises TypeError for protocols without @runtime_checkable
    if getattr(t, "_is_protocol", False) and not getattr(t, "_is_runtime_protocol", False):
        return Object
    return t


def from_annotation(annotation: object) -> TypeRef:
    if annotation is None or annotation is type(None):
        return VOID
    if annotation is inspect.Parameter.empty or annotation is typing.Any:
        return Object
    if typing.get_origin(annotation) is Annotated:
        base, *metadata = typing.get_args(annotation)
        for item in metadata:
            if isinstance(item, Primitive):
                return item
        return from_annotation(base)
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return Object
    if isinstance(origin, type):
        return _checkable(origin)
    if isinstance(annotation, type):
        return _checkable(annotation)
    return Object
