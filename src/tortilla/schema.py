from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from tortilla.exceptions import NeverThrown
from tortilla.order_contract import OrderPolicy, normalize_policy


class WrapSettings(BaseModel):
    prefix: str = ""
    order: Optional[str] = None
    width: int = Field(default=100, gt=0)
    include: List[str] = []
    exclude: List[str] = []
    coerce: Union[bool, str] = True
    metadata: bool = True
    instrument: bool = True

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _split_patterns(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("order")
    @classmethod
    def _known_order(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        try:
            return normalize_policy(value).value
        except NeverThrown as exc:
            raise ValueError(f"unknown order policy: {value}") from exc

    def order_policy(self) -> OrderPolicy | None:
        if self.order is None:
            return None
        return normalize_policy(self.order)


class LoggingSettings(BaseModel):
    level: str = "WARNING"
    json_format: bool = Field(default=False, alias="json")

    model_config = {"populate_by_name": True}
