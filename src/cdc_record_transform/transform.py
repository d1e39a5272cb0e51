from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from datetime import datetime, timezone
from typing import Any

from cdc_record_transform.models import (
    ORDER_EVENTS_TABLE,
    TABLE_NAME_FIELD,
    CustomerRow,
    Event,
    OrderEventRow,
    OrderRow,
    OutputRecord,
)

LOGGER = logging.getLogger(__name__)

EVENT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

CUSTOMERS_TABLE = "customers"
ORDERS_TABLE = "orders"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def event_timestamp() -> str:
    """Processing time of the current transformation, fixed width and sortable."""
    return utcnow().strftime(EVENT_TIMESTAMP_FORMAT)


def derive_username(email: Any) -> str | None:
    return CustomerRow(email=email).username


def transform_event(
    event: Event,
    *,
    table_name_field: str = TABLE_NAME_FIELD,
    order_events_table: str = ORDER_EVENTS_TABLE,
) -> list[OutputRecord]:
    """Route one change event, enriching or fanning it out by source table.

    Never raises on missing or malformed fields: every branch degrades to a
    pass-through of the original event.
    """

    if not isinstance(event, Mapping):
        return [OutputRecord(event=event, table_name=None)]

    table_name = event.get(table_name_field)
    if not isinstance(table_name, str) or not table_name:
        LOGGER.debug("unrouted_event", extra={"table_name_field": table_name_field})
        return [OutputRecord(event=event, table_name=None)]

    if table_name == CUSTOMERS_TABLE:
        return [OutputRecord(event=_with_username(event), table_name=table_name)]

    if table_name == ORDERS_TABLE:
        records = [OutputRecord(event=event, table_name=table_name)]
        order_event = _order_event(event)
        if order_event is not None:
            records.append(
                OutputRecord(event=order_event.model_dump(), table_name=order_events_table)
            )
        return records

    return [OutputRecord(event=event, table_name=table_name)]


def transform(
    event: Event,
    *,
    table_name_field: str = TABLE_NAME_FIELD,
    order_events_table: str = ORDER_EVENTS_TABLE,
) -> tuple[Event, str | None] | list[tuple[Event, str | None]]:
    """Pipeline tool entry point: one ``(event, table)`` pair, or a list when fanned out."""

    records = transform_event(
        event,
        table_name_field=table_name_field,
        order_events_table=order_events_table,
    )
    if len(records) == 1:
        return records[0].as_tuple()
    return [record.as_tuple() for record in records]


def _with_username(event: Mapping[str, Any]) -> Event:
    username = CustomerRow.from_event(event).username
    if username is None:
        return event  # type: ignore[return-value]

    target: MutableMapping[str, Any] = event if isinstance(event, MutableMapping) else dict(event)
    target["username"] = username
    return target


def _order_event(event: Mapping[str, Any]) -> OrderEventRow | None:
    order = OrderRow.from_event(event)
    event_type = order.event_type
    if event_type is None:
        return None

    return OrderEventRow(
        order_id=order.id,
        customer_id=order.customer_id,
        event_type=event_type,
        event_timestamp=event_timestamp(),
    )
