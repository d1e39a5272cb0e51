from __future__ import annotations

import json
from typing import Any

from cdc_record_transform.models import TABLE_NAME_FIELD, Event

SCHEMA_NAME_FIELD = "__schema_name"
OPERATION_FIELD = "__op"

ROW_ACTIONS = frozenset({"I", "U", "D"})
# Transaction boundaries, logical messages and TRUNCATE carry no row to route.
CONTROL_ACTIONS = frozenset({"B", "C", "M", "T"})


def parse_change(payload: bytes | str) -> dict[str, Any] | None:
    """Parse one wal2json line into a JSON object, or None when it is not one."""
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    normalized = payload.rstrip("\n")
    if not normalized:
        return None

    try:
        decoded = json.loads(normalized)
    except (ValueError, RecursionError):
        # ValueError covers JSONDecodeError and oversized integer literals.
        return None

    if not isinstance(decoded, dict):
        return None

    return decoded


def is_control_change(parsed: dict[str, Any]) -> bool:
    return parsed.get("action") in CONTROL_ACTIONS


def event_from_change(
    parsed: dict[str, Any],
    *,
    table_name_field: str = TABLE_NAME_FIELD,
) -> Event | None:
    action = parsed.get("action")
    if action not in ROW_ACTIONS:
        return None

    table = parsed.get("table")
    if not isinstance(table, str) or not table:
        return None

    # Deletes only carry the replica identity.
    source_field = "identity" if action == "D" else "columns"
    event: Event = _column_value_map(parsed.get(source_field))
    event[table_name_field] = table
    schema = parsed.get("schema")
    if isinstance(schema, str):
        event[SCHEMA_NAME_FIELD] = schema
    event[OPERATION_FIELD] = action
    return event


def decode_change(
    payload: bytes | str,
    *,
    table_name_field: str = TABLE_NAME_FIELD,
) -> Event | None:
    """Turn one wal2json format-version 2 row change into a transformer event.

    Returns None for transaction markers, logical messages, and payloads that
    are not a JSON object naming a table.
    """

    parsed = parse_change(payload)
    if parsed is None:
        return None
    return event_from_change(parsed, table_name_field=table_name_field)


def _column_value_map(entries: Any) -> dict[str, Any]:
    value_by_name: dict[str, Any] = {}
    if not isinstance(entries, list):
        return value_by_name

    for entry in entries:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        if not isinstance(name, str):
            continue
        if "value" not in entry:
            continue
        value_by_name[name] = entry["value"]
    return value_by_name
