"""Invariant markers and proof mode for generated routines."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import NoReturn

from tortilla.exceptions import NeverThrown

_PROOF_MODE: ContextVar[bool] = ContextVar("tortilla_proof_mode", default=False)


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The env payload is diagnostic metadata attached to the raised
    `NeverThrown`; it is not evaluated.
    """
    raise NeverThrown(reason or "never() marker reached", env=env)


def proof_mode() -> bool:
    return _PROOF_MODE.get()


@contextmanager
def proof_mode_scope(enabled: bool):
    token = _PROOF_MODE.set(bool(enabled))
    try:
        yield
    finally:
        _PROOF_MODE.reset(token)
