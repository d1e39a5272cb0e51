from __future__ import annotations

import argparse
import contextlib
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from cdc_record_transform.runner import run_batch
from cdc_record_transform.settings import Settings

LOGGER = logging.getLogger(__name__)


def configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cdc-record-transform",
        description="Transform newline-delimited change events and print routed records.",
    )
    parser.add_argument("input", nargs="?", type=Path, help="NDJSON change events (default: stdin)")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="destination for routed records (default: stdout)",
    )
    return parser.parse_args(argv)


def run(argv: Sequence[str] | None = None) -> int:
    settings = Settings()
    configure_logging()
    args = parse_args(argv)

    LOGGER.info(
        "service_start",
        extra={
            "input_format": settings.input_format,
            "order_events_table": settings.order_events_table,
        },
    )

    with contextlib.ExitStack() as stack:
        source = sys.stdin
        if args.input is not None:
            source = stack.enter_context(args.input.open("r", encoding="utf-8"))
        destination = sys.stdout
        if args.output is not None:
            destination = stack.enter_context(args.output.open("w", encoding="utf-8"))

        run_batch(source, destination, settings=settings)
        destination.flush()
    return 0
