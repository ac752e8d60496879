"""Reading ingestion: identity, timestamp and attribution defaults."""
from datetime import datetime, timedelta, timezone

import pytest

from peer.errors import ClientError
from peer.schemas import ReadingCreate
from peer.services.ingestion import (
    DEFAULT_UPLOADER,
    ingest_reading,
    new_reading_id,
    resolve_uploaded_by,
)


def test_client_epoch_is_used_when_non_zero(memory_store, fixed_clock):
    reading = ingest_reading(
        memory_store, ReadingCreate(device_id="d1", created_at=1_700_000_000), clock=fixed_clock,
    )
    assert reading.created_at == datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)
    assert memory_store.rows == [reading]


@pytest.mark.parametrize("payload", [ReadingCreate(device_id="d1"), ReadingCreate(device_id="d1", created_at=0)])
def test_missing_or_zero_epoch_uses_server_clock(memory_store, fixed_clock, payload):
    reading = ingest_reading(memory_store, payload, clock=fixed_clock)
    assert reading.created_at == fixed_clock()


def test_client_epoch_ignored_when_not_trusted(memory_store, fixed_clock):
    reading = ingest_reading(
        memory_store,
        ReadingCreate(device_id="d1", created_at=1_700_000_000),
        trust_client_timestamp=False,
        clock=fixed_clock,
    )
    assert reading.created_at == fixed_clock()


def test_out_of_range_epoch_is_client_error_and_not_stored(memory_store, fixed_clock):
    with pytest.raises(ClientError):
        ingest_reading(memory_store, ReadingCreate(created_at=10**18), clock=fixed_clock)
    assert memory_store.rows == []


def test_omitted_fields_take_zero_values(memory_store, fixed_clock):
    reading = ingest_reading(memory_store, ReadingCreate(), clock=fixed_clock)
    assert reading.device_id == ""
    assert reading.is_backed_up is False
    assert (reading.temperature, reading.humidity, reading.ethylene_level) == (0.0, 0.0, 0.0)


@pytest.mark.parametrize(
    "client_value, header_value, expected",
    [
        ("gateway-7", "curl/8.0", "gateway-7"),
        ("", "ESP32HTTPClient", "ESP32HTTPClient"),
        ("", None, DEFAULT_UPLOADER),
        ("", "", DEFAULT_UPLOADER),
    ],
)
def test_uploaded_by_fallback_chain(client_value, header_value, expected):
    assert resolve_uploaded_by(client_value, header_value) == expected


def test_uploaded_by_never_empty_even_with_blank_default():
    assert resolve_uploaded_by("", None, default="") == DEFAULT_UPLOADER


def test_ingest_uses_header_hint_and_custom_default(memory_store, fixed_clock):
    first = ingest_reading(memory_store, ReadingCreate(device_id="a"), uploader_hint="pico-w", clock=fixed_clock)
    second = ingest_reading(memory_store, ReadingCreate(device_id="b"), default_uploader="lab", clock=fixed_clock)
    assert first.uploaded_by == "pico-w"
    assert second.uploaded_by == "lab"


def test_ids_are_time_prefixed_and_distinct_within_one_second(memory_store, fixed_clock):
    readings = [ingest_reading(memory_store, ReadingCreate(device_id="d"), clock=fixed_clock) for _ in range(200)]
    ids = {r.id for r in readings}
    assert len(ids) == 200
    assert all(r.id.startswith("20261017123045-") for r in readings)


def test_new_reading_id_normalizes_to_utc():
    local = datetime(2026, 10, 17, 14, 30, 45, tzinfo=timezone(timedelta(hours=2)))
    assert new_reading_id(local).startswith("20261017123045-")


def test_backed_up_flag_accepts_both_spellings():
    assert ReadingCreate.model_validate({"is_backedup": True}).is_backed_up is True
    assert ReadingCreate.model_validate({"is_backed_up": True}).is_backed_up is True


def test_null_fields_are_zero_values():
    payload = ReadingCreate.model_validate(
        {"device_id": None, "temperature": None, "created_at": None, "is_backedup": None}
    )
    assert payload.device_id == ""
    assert payload.temperature == 0.0
    assert payload.created_at == 0
    assert payload.is_backed_up is False
