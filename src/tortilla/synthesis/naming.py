from __future__ import annotations

import keyword
import re
from typing import Iterable

_WORD_BOUNDARY_RE = re.compile(r"(.)([A-Z][a-z]+)")
_LOWER_UPPER_RE = re.compile(r"([a-z0-9])([A-Z])")


def camel_to_kebab(value: str) -> str:
    value = _WORD_BOUNDARY_RE.sub(r"\1-\2", value)
    value = _LOWER_UPPER_RE.sub(r"\1-\2", value)
    return value.lower()


def transform_name(value: str) -> str:
    """Normalised routine name: ``toUpperCase`` becomes ``to-upper-case``.

    Already normalised names are returned unchanged.
    """
    return camel_to_kebab(value)


def _normalize_identifier(value: str, fallback: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9_]", "", value)
    if not cleaned:
        return fallback
    if cleaned[0].isdigit():
        return f"{fallback}{cleaned}"
    return cleaned


def python_identifier(name: str, fallback: str = "routine") -> str:
    identifier = _normalize_identifier(name.replace("-", "_"), fallback)
    if keyword.iskeyword(identifier):
        identifier = f"{identifier}_"
    return identifier


def unique_identifier(base: str, existing: Iterable[str]) -> str:
    taken = set(existing)
    name = base
    counter = 2
    while name in taken:
        name = f"{base}{counter}"
        counter += 1
    return name
