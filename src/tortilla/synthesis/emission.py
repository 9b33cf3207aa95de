"""Turn routine specs into directly callable dispatch functions."""

from __future__ import annotations

import textwrap
import types
from collections.abc import MutableMapping
from typing import Callable, Iterable

import structlog

from tortilla.order_contract import OrderPolicy
from tortilla.reflect.adapter_contract import ReflectionAdapter
from tortilla.reflect.filters import MemberPredicate
from tortilla.synthesis.assembler import assemble_class
from tortilla.synthesis.model import Coercion, RoutineSpec, WrapOptions

log = structlog.get_logger()


def describe_routine(spec: RoutineSpec, *, width: int | None = None) -> str:
    lines = [f"Dispatch {spec.owner}.{spec.member_name}.", "", "Signatures:"]
    for parameters, returns in spec.declared_signatures:
        line = f"({', '.join(parameters)}) -> {returns}"
        if width is None:
            lines.append(f"    {line}")
        else:
            lines.extend(
                textwrap.wrap(
                    line,
                    width=max(width - 4, 20),
                    initial_indent="    ",
                    subsequent_indent="        ",
                    break_on_hyphens=False,
                )
            )
    return "\n".join(lines)


def build_routine(spec: RoutineSpec) -> Callable[..., object]:
    def routine(*args: object) -> object:
        return spec.dispatch(args)

    routine.__name__ = spec.identifier
    routine.__qualname__ = spec.identifier
    routine.__doc__ = describe_routine(spec)
    routine.__tortilla_routine__ = spec  # type: ignore[attr-defined]
    return routine


def build_namespace(specs: Iterable[RoutineSpec]) -> types.SimpleNamespace:
    return types.SimpleNamespace(**{spec.identifier: build_routine(spec) for spec in specs})


def wrap_class(
    class_handle: object,
    *,
    prefix: str = "",
    coerce: Coercion | None = None,
    filter_predicate: MemberPredicate | None = None,
    order: OrderPolicy | str | None = None,
    adapter: ReflectionAdapter | None = None,
) -> types.SimpleNamespace:
    options = WrapOptions(
        prefix=prefix,
        coerce=coerce,
        filter_predicate=filter_predicate,
        order=order,
    )
    return build_namespace(assemble_class(class_handle, options, adapter=adapter))


def install_wrappers(
    target: MutableMapping[str, object] | types.ModuleType,
    class_handle: object,
    *,
    prefix: str = "",
    coerce: Coercion | None = None,
    filter_predicate: MemberPredicate | None = None,
    order: OrderPolicy | str | None = None,
    adapter: ReflectionAdapter | None = None,
) -> list[str]:
    """Define one routine per member name in `target` and return their names."""
    namespace = wrap_class(
        class_handle,
        prefix=prefix,
        coerce=coerce,
        filter_predicate=filter_predicate,
        order=order,
        adapter=adapter,
    )
    routines = vars(namespace)
    if isinstance(target, types.ModuleType):
        for name, routine in routines.items():
            setattr(target, name, routine)
    else:
        target.update(routines)
    log.debug("emission.installed", target=getattr(target, "__name__", "mapping"), names=len(routines))
    return list(routines)
