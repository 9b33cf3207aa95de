from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from tortilla.config import (
    load_config,
    logging_settings,
    merge_payload,
    wrap_defaults,
    wrap_settings,
)
from tortilla.order_contract import OrderPolicy


def test_missing_or_malformed_config_is_empty(tmp_path: Path, write_config) -> None:
    assert load_config(root=tmp_path) == {}
    path = write_config("[wrap\nprefix = ")
    assert load_config(config_path=path) == {}


def test_wrap_defaults_reads_section(write_config) -> None:
    path = write_config('[wrap]\nprefix = "j-"\norder = "sorted"\nwidth = 60\n')
    assert wrap_defaults(config_path=path) == {"prefix": "j-", "order": "sorted", "width": 60}


def test_merge_payload_prefers_explicit_values() -> None:
    merged = merge_payload({"prefix": "x-", "width": None}, {"prefix": "j-", "width": 60})
    assert merged == {"prefix": "x-", "width": 60}


def test_wrap_settings_merge_and_validate(write_config) -> None:
    path = write_config(
        '[wrap]\nprefix = "j-"\norder = "sorted"\ninclude = "^add"\nexclude = ["str", "int"]\n'
    )
    settings = wrap_settings({"width": 80}, config_path=path)
    assert settings.prefix == "j-"
    assert settings.order_policy() is OrderPolicy.SORT
    assert settings.width == 80
    assert settings.include == ["^add"]
    assert settings.exclude == ["str", "int"]
    assert settings.coerce is True
    assert settings.metadata and settings.instrument


def test_wrap_settings_defaults_without_config(tmp_path: Path) -> None:
    settings = wrap_settings({}, root=tmp_path)
    assert settings.width == 100
    assert settings.order_policy() is None


@pytest.mark.parametrize("payload", [{"width": 0}, {"order": "random"}])
def test_wrap_settings_reject_bad_values(tmp_path: Path, payload) -> None:
    with pytest.raises(ValidationError):
        wrap_settings(payload, root=tmp_path)


def test_logging_settings(write_config) -> None:
    path = write_config('[logging]\nlevel = "DEBUG"\njson = true\n')
    settings = logging_settings({"level": None}, config_path=path)
    assert settings.level == "DEBUG"
    assert settings.json_format is True
