from __future__ import annotations

import functools
import importlib
import numbers
from typing import Callable

from tortilla.types import Byte, Float, Integer, Short

_INTEGRAL_TARGETS: tuple[type, ...] = (Integer, Short, Byte)


@functools.singledispatch
def coerce(value: object, target: type) -> object:
    """Convert `value` towards `target` where the platform would widen or narrow.

    Numbers become `Integer`, `Short`, `Byte` or `Float` when that is the
    parameter type; everything else passes through unchanged.
    """
    return value


@coerce.register(numbers.Real)
def _coerce_real(value: numbers.Real, target: type) -> object:
    if isinstance(value, bool):
        return value
    if target in _INTEGRAL_TARGETS:
        try:
            return target(int(value))
        except (ValueError, OverflowError):
            # NaN and infinities stay as they are and fail the guard
            return value
    if target is Float:
        return Float(value)
    return value


def identity(value: object, _target: type) -> object:
    return value


def callable_path(fn: Callable[..., object]) -> str:
    module = getattr(fn, "__module__", None)
    qualname = getattr(fn, "__qualname__", None)
    if not module or not qualname or "<" in qualname:
        raise ValueError(f"{fn!r} is not importable by dotted path")
    return f"{module}.{qualname}"


def resolve_callable(value: object) -> Callable[..., object] | None:
    """Accept None, a callable, or a dotted ``module.attr`` / ``module:attr`` path."""
    if value is None:
        return None
    if callable(value):
        return value
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"expecting a function, a dotted path or None, got: {value!r}")
    path = value.strip()
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise ValueError(f"not a dotted path: {path!r}")
    obj: object = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    if not callable(obj):
        raise TypeError(f"{path} does not name a function")
    return obj
