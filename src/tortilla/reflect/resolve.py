from __future__ import annotations

import builtins
import importlib

import structlog

from tortilla.exceptions import ClassNotResolvable

log = structlog.get_logger()


def resolve_class(handle: object) -> type:
    """Map a class, builtin class name or dotted path to a class object."""
    if isinstance(handle, type):
        return handle
    if not isinstance(handle, str) or not handle.strip():
        raise ClassNotResolvable(handle, "expected a class or a dotted class name")
    name = handle.strip()
    if "." not in name:
        candidate = getattr(builtins, name, None)
        if isinstance(candidate, type):
            return candidate
        raise ClassNotResolvable(handle, "no builtin class with that name")
    parts = name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj: object = importlib.import_module(module_name)
        except ImportError as exc:
            log.debug("resolve.import_failed", module=module_name, error=str(exc))
            continue
        try:
            for attr in parts[split:]:
                obj = getattr(obj, attr)
        except AttributeError:
            raise ClassNotResolvable(
                handle, f"module {module_name} has no attribute {'.'.join(parts[split:])}"
            ) from None
        if isinstance(obj, type):
            return obj
        raise ClassNotResolvable(handle, f"{name} is not a class")
    raise ClassNotResolvable(handle, "module not found")
