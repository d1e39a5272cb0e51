from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, TextIO

from pydantic import BaseModel, Field

from cdc_record_transform.models import Event
from cdc_record_transform.settings import Settings
from cdc_record_transform.transform import transform_event
from cdc_record_transform.wal2json import event_from_change, is_control_change, parse_change

LOGGER = logging.getLogger(__name__)


class BatchStats(BaseModel):
    read: int = 0
    emitted: int = 0
    dropped: int = 0
    skipped: int = 0
    ignored: int = 0
    by_table: dict[str, int] = Field(default_factory=dict)


def run_batch(lines: Iterable[str], output: TextIO, *, settings: Settings) -> BatchStats:
    """Replay newline-delimited change events through the transformer."""

    stats = BatchStats()
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue

        stats.read += 1
        event, is_control = _decode_line(
            line,
            input_format=settings.input_format,
            table_name_field=settings.table_name_field,
        )
        if is_control:
            stats.ignored += 1
            LOGGER.debug("ignored_control_line", extra={"line_number": line_number})
            continue

        if event is None:
            stats.skipped += 1
            LOGGER.warning(
                "skipped_malformed_line",
                extra={"line_number": line_number, "input_format": settings.input_format},
            )
            continue

        records = transform_event(
            event,
            table_name_field=settings.table_name_field,
            order_events_table=settings.order_events_table,
        )
        for record in records:
            if record.table_name is None:
                stats.dropped += 1
                LOGGER.info("dropped_unrouted_event", extra={"line_number": line_number})
                continue

            output.write(
                json.dumps({"table": record.table_name, "record": record.event}, default=str)
            )
            output.write("\n")
            stats.emitted += 1
            stats.by_table[record.table_name] = stats.by_table.get(record.table_name, 0) + 1

    LOGGER.info("batch_complete", extra=stats.model_dump())
    return stats


def _decode_line(
    line: str,
    *,
    input_format: str,
    table_name_field: str,
) -> tuple[Event | None, bool]:
    """Return the decoded event and whether the line was a row-less control record."""
    if input_format == "wal2json":
        parsed = parse_change(line)
        if parsed is None:
            return None, False
        if is_control_change(parsed):
            return None, True
        return event_from_change(parsed, table_name_field=table_name_field), False

    try:
        decoded: Any = json.loads(line)
    except (ValueError, RecursionError):
        # ValueError covers JSONDecodeError and oversized integer literals.
        return None, False

    if not isinstance(decoded, dict):
        return None, False
    return decoded, False
