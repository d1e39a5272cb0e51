from __future__ import annotations

import re
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cdc_record_transform.models import ORDER_EVENTS_TABLE, TABLE_NAME_FIELD

_TABLE_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False)

    table_name_field: str = Field(default=TABLE_NAME_FIELD, alias="TABLE_NAME_FIELD")
    order_events_table: str = Field(default=ORDER_EVENTS_TABLE, alias="ORDER_EVENTS_TABLE")
    input_format: Literal["event", "wal2json"] = Field(default="event", alias="INPUT_FORMAT")

    @field_validator("order_events_table")
    @classmethod
    def _validate_table_name(cls, value: str) -> str:
        if not _TABLE_PATTERN.fullmatch(value):
            raise ValueError(
                "ORDER_EVENTS_TABLE must start with an ASCII letter or underscore and only contain "
                "ASCII letters, numbers, and underscore"
            )
        return value

    @field_validator("table_name_field")
    @classmethod
    def _validate_table_name_field(cls, value: str) -> str:
        if not value:
            raise ValueError("TABLE_NAME_FIELD must not be empty")
        return value
