from __future__ import annotations

import pytest
from pydantic import ValidationError

from cdc_record_transform.settings import Settings


@pytest.fixture()
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TABLE_NAME_FIELD", "ORDER_EVENTS_TABLE", "INPUT_FORMAT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults(_clean_env: None) -> None:
    settings = Settings()

    assert settings.table_name_field == "__table_name"
    assert settings.order_events_table == "order_events"
    assert settings.input_format == "event"


def test_reads_environment(_clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ORDER_EVENTS_TABLE", "order_lifecycle")
    monkeypatch.setenv("INPUT_FORMAT", "wal2json")

    settings = Settings()

    assert settings.order_events_table == "order_lifecycle"
    assert settings.input_format == "wal2json"


def test_order_events_table_must_be_identifier(
    _clean_env: None,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("ORDER_EVENTS_TABLE", "order-events; drop")

    with pytest.raises(ValidationError):
        Settings()


def test_input_format_rejects_unknown_values(
    _clean_env: None,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("INPUT_FORMAT", "avro")

    with pytest.raises(ValidationError):
        Settings()


def test_table_name_field_must_not_be_empty(
    _clean_env: None,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("TABLE_NAME_FIELD", "")

    with pytest.raises(ValidationError):
        Settings()


def test_order_events_table_must_not_start_with_digit(
    _clean_env: None,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("ORDER_EVENTS_TABLE", "1events")

    with pytest.raises(ValidationError) as exc_info:
        Settings()

    assert "must start with an ASCII letter or underscore" in str(exc_info.value)
