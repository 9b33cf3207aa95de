from __future__ import annotations

import inspect
import types
import typing
from dataclasses import dataclass
from typing import Callable, Iterable

import structlog

from tortilla.reflect.adapter_contract import ReflectionAdapter
from tortilla.reflect.model import Member, MemberKind
from tortilla.types import TypeRef, from_annotation, type_name

log = structlog.get_logger()

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class _Shape:
    params: tuple[TypeRef, ...]
    varargs: TypeRef | None
    returns: TypeRef


def _signature(obj: object) -> inspect.Signature | None:
    try:
        return inspect.signature(obj, eval_str=True)
    except (NameError, SyntaxError, AttributeError) as exc:
        log.debug("reflect.annotations_unresolved", target=repr(obj), error=str(exc))
    except (ValueError, TypeError):
        return None
    try:
        return inspect.signature(obj)
    except (ValueError, TypeError):
        return None


def _shapes(signature: inspect.Signature, *, skip_receiver: bool) -> list[_Shape]:
    """Expand one signature into the positional shapes it accepts.

    Defaults telescope: ``f(a, b=1)`` accepts one or two arguments, so it
    yields two shapes. A required keyword-only parameter cannot be passed
    positionally and makes the signature unwrappable.
    """
    params = list(signature.parameters.values())
    if skip_receiver and params and params[0].kind in _POSITIONAL:
        params = params[1:]
    positional: list[inspect.Parameter] = []
    varargs: inspect.Parameter | None = None
    for param in params:
        if param.kind in _POSITIONAL:
            positional.append(param)
        elif param.kind is inspect.Parameter.VAR_POSITIONAL:
            varargs = param
        elif param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is param.empty:
            return []
    declared = tuple(from_annotation(param.annotation) for param in positional)
    required = next(
        (index for index, param in enumerate(positional) if param.default is not param.empty),
        len(positional),
    )
    returns = from_annotation(signature.return_annotation)
    shapes = [_Shape(declared[:count], None, returns) for count in range(required, len(declared))]
    varargs_type = None if varargs is None else from_annotation(varargs.annotation)
    shapes.append(_Shape(declared, varargs_type, returns))
    return shapes


def _overloads(func: object) -> list[Callable[..., object]]:
    try:
        return list(typing.get_overloads(func))
    except AttributeError:
        return []


def _signature_sources(func: Callable[..., object]) -> list[inspect.Signature]:
    overloads = _overloads(func)
    candidates: Iterable[object] = overloads if overloads else [func]
    signatures = []
    for candidate in candidates:
        signature = _signature(candidate)
        if signature is not None:
            signatures.append(signature)
    return signatures


def _own_initializer(cls: type) -> Callable[..., object] | None:
    for klass in cls.__mro__:
        if klass is object:
            return None
        init = vars(klass).get("__init__")
        if init is not None:
            return init
    return None


class PythonReflectionAdapter(ReflectionAdapter):
    """Reflects Python classes through `inspect` and `typing.get_overloads`.

    Each `@typing.overload` of a constructor or method is one member sharing
    the implementation as its invocation target. Members declared on
    `object` and non-public names are not reflected.
    """

    platform_id = "python"

    def class_members(self, cls: type) -> list[Member]:
        return [*self.constructors(cls), *self.methods(cls)]

    def constructors(self, cls: type) -> list[Member]:
        init = _own_initializer(cls)
        signatures: list[inspect.Signature] = []
        skip_receiver = True
        if init is not None and _overloads(init):
            signatures = _signature_sources(init)
        else:
            class_signature = _signature(cls)
            if class_signature is not None:
                signatures = [class_signature]
                skip_receiver = False
        if not signatures:
            signatures = [inspect.Signature()]
            skip_receiver = False
        members: list[Member] = []
        for signature in signatures:
            for shape in _shapes(signature, skip_receiver=skip_receiver):
                members.append(
                    Member(
                        name=cls.__name__,
                        kind=MemberKind.CONSTRUCTOR,
                        declared_types=shape.params,
                        return_type=cls,
                        declaring_class=cls,
                        invocation_target=cls,
                        invocation_path=type_name(cls),
                        varargs_type=shape.varargs,
                        is_static=True,
                    )
                )
        return members

    def methods(self, cls: type) -> list[Member]:
        members: list[Member] = []
        seen: set[str] = set()
        for klass in cls.__mro__:
            if klass is object:
                continue
            for name, attr in vars(klass).items():
                if name in seen:
                    continue
                seen.add(name)
                if name.startswith("_"):
                    continue
                members.extend(self._method_members(cls, klass, name, attr))
        return members

    def _method_members(
        self,
        cls: type,
        klass: type,
        name: str,
        attr: object,
    ) -> list[Member]:
        signatures: list[inspect.Signature]
        receiver: tuple[TypeRef, ...] = ()
        static = True
        if isinstance(attr, staticmethod):
            target = attr.__func__
            signatures = _signature_sources(attr.__func__)
            skip_receiver = False
        elif isinstance(attr, classmethod):
            target = getattr(cls, name)
            if _overloads(attr.__func__):
                signatures = _signature_sources(attr.__func__)
                skip_receiver = True
            else:
                signatures = _signature_sources(target)
                skip_receiver = False
        elif isinstance(attr, types.ClassMethodDescriptorType):
            target = getattr(cls, name)
            signatures = _signature_sources(target)
            skip_receiver = False
        elif inspect.isfunction(attr) or inspect.ismethoddescriptor(attr):
            target = attr
            signatures = _signature_sources(attr)
            skip_receiver = True
            receiver = (klass,)
            static = False
        else:
            return []
        if not signatures:
            log.debug("reflect.member_skipped", owner=type_name(cls), member=name, reason="no signature")
            return []
        members: list[Member] = []
        for signature in signatures:
            shapes = _shapes(signature, skip_receiver=skip_receiver)
            if not shapes:
                log.debug(
                    "reflect.member_skipped",
                    owner=type_name(cls),
                    member=name,
                    reason="required keyword-only parameter",
                )
            for shape in shapes:
                members.append(
                    Member(
                        name=name,
                        kind=MemberKind.METHOD,
                        declared_types=receiver + shape.params,
                        return_type=shape.returns,
                        declaring_class=klass,
                        invocation_target=target,
                        invocation_path=f"{type_name(cls)}.{name}",
                        varargs_type=shape.varargs,
                        is_static=static,
                    )
                )
        return members
