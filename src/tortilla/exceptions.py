"""Exception types raised by tortilla generation and generated routines."""

from __future__ import annotations

from typing import Mapping, Sequence


class TortillaError(Exception):
    """Base class for tortilla errors."""


class ClassNotResolvable(TortillaError, LookupError):
    def __init__(self, handle: object, reason: str = "") -> None:
        self.handle = handle
        self.reason = reason
        message = f"Invalid class: {handle}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidFilterPattern(TortillaError, ValueError):
    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid filter pattern {pattern!r}: {reason}")


class DependencyResolutionError(TortillaError):
    def __init__(self, coordinates: Sequence[object], reason: str) -> None:
        self.coordinates = tuple(coordinates)
        self.reason = reason
        rendered = ", ".join(str(coord) for coord in self.coordinates)
        super().__init__(f"Failed to resolve dependencies [{rendered}]: {reason}")


class OverloadResolutionError(TortillaError, TypeError):
    """Raised by a generated routine when no member accepts the arguments.

    The message lists the runtime type of every supplied argument, in call
    order, so that the mismatch can be diagnosed from the traceback alone.
    """

    def __init__(
        self,
        owner: str,
        member_name: str,
        args: Sequence[object],
        *,
        reason: str = "Unrecognised types for",
    ) -> None:
        from tortilla.types import type_name

        self.owner = owner
        self.member_name = member_name
        self.arg_types = tuple(type_name(type(arg)) for arg in args)
        super().__init__(
            f"{reason} {owner}.{member_name}: {', '.join(self.arg_types)}"
        )


class NeverRaise(RuntimeError):
    """Sentinel exception for code paths that must be unreachable.

    Raised by `tortilla.invariants.never`. Reaching it means a generation
    invariant was violated, not that the caller passed bad input.
    """

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env = dict(env or {})

    @property
    def payload(self) -> dict[str, object]:
        return {"reason": self.reason, "env": {k: repr(v) for k, v in self.env.items()}}


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""
