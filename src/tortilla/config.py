from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from tortilla.schema import LoggingSettings, WrapSettings

DEFAULT_CONFIG_NAME = "tortilla.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _section(data: TomlTable, name: str) -> TomlTable:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def wrap_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "wrap")


def logging_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "logging")


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def wrap_settings(
    payload: TomlTable,
    root: Path | None = None,
    config_path: Path | None = None,
) -> WrapSettings:
    """Validated `[wrap]` settings, explicit payload values taking precedence.

    Raises `pydantic.ValidationError` when a value has the wrong shape.
    """
    defaults = wrap_defaults(root=root, config_path=config_path)
    return WrapSettings.model_validate(merge_payload(payload, defaults))


def logging_settings(
    payload: TomlTable,
    root: Path | None = None,
    config_path: Path | None = None,
) -> LoggingSettings:
    defaults = logging_defaults(root=root, config_path=config_path)
    return LoggingSettings.model_validate(merge_payload(payload, defaults))
