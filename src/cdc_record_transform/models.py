from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, SkipValidation

FieldValue = str | int | float | bool | None
Event = MutableMapping[str, FieldValue]

TABLE_NAME_FIELD = "__table_name"
ORDER_EVENTS_TABLE = "order_events"

_RowT = TypeVar("_RowT", bound="_LenientRow")


class OrderStatus(str, Enum):
    DELIVERED = "delivered"
    PLACED = "placed"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


STATUS_EVENT_TYPES: Mapping[str, str] = MappingProxyType(
    {status.value: f"order_{status.value}" for status in OrderStatus}
)


class OutputRecord(BaseModel):
    """One routed record; a ``None`` table means the caller must not route it."""

    model_config = ConfigDict(frozen=True)

    # Kept by reference: callers rely on in-place enrichment of the source event.
    event: SkipValidation[dict[str, Any]]
    table_name: str | None

    def as_tuple(self) -> tuple[Event, str | None]:
        return self.event, self.table_name


class _LenientRow(BaseModel):
    """Typed view over a change-feed row; every column may be missing.

    Only the modelled columns are read. The source event keeps every other
    column untouched.
    """

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_event(cls: type[_RowT], event: Mapping[str, Any]) -> _RowT:
        return cls.model_validate({name: event[name] for name in cls.model_fields if name in event})


class CustomerRow(_LenientRow):
    id: Any = None
    email: Any = None

    @property
    def username(self) -> str | None:
        if not isinstance(self.email, str) or "@" not in self.email:
            return None
        return self.email.split("@", 1)[0]


class OrderRow(_LenientRow):
    id: Any = None
    customer_id: Any = None
    status: Any = None

    @property
    def event_type(self) -> str | None:
        if not isinstance(self.status, str):
            return None
        return STATUS_EVENT_TYPES.get(self.status)


class OrderEventRow(BaseModel):
    """Derived lifecycle record emitted alongside an ``orders`` change."""

    model_config = ConfigDict(frozen=True)

    order_id: Any = None
    customer_id: Any = None
    event_type: str
    event_timestamp: str
