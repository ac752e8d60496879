"""Test fixtures for the sensor API: SQLite-backed app and in-memory stores."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List

import pytest
from fastapi.testclient import TestClient

from peer.config import Settings
from peer.errors import StoreError
from peer.main import create_app
from peer.models import Reading
from peer.schemas import QueryFilter
from peer.schemas.reading import to_utc


FIXED_NOW = datetime(2026, 10, 17, 12, 30, 45, tzinfo=timezone.utc)


class MemoryStore:
    """List-backed store with the same filter/order semantics as the SQL one."""

    def __init__(self) -> None:
        self.rows: List[Reading] = []

    def create(self, reading: Reading) -> None:
        if any(r.id == reading.id for r in self.rows):
            raise StoreError(f"duplicate key value violates unique constraint: {reading.id}")
        self.rows.append(reading)

    def find(self, query_filter: QueryFilter, order: str = "desc") -> List[Reading]:
        def matches(r: Reading) -> bool:
            created = to_utc(r.created_at)
            if query_filter.device_id is not None and r.device_id != query_filter.device_id:
                return False
            if query_filter.start_time is not None and created < query_filter.start_time:
                return False
            if query_filter.end_time is not None and created > query_filter.end_time:
                return False
            return True

        rows = [r for r in self.rows if matches(r)]
        if order == "desc":
            rows.sort(key=lambda r: to_utc(r.created_at), reverse=True)
        elif order == "asc":
            rows.sort(key=lambda r: to_utc(r.created_at))
        return rows

    def distinct_device_ids(self) -> List[str]:
        return sorted({r.device_id for r in self.rows})


class BrokenStore:
    """Every call fails the way a lost database connection would."""

    message = "could not connect to server: Connection refused"

    def create(self, reading):
        raise StoreError(self.message)

    def find(self, query_filter, order="desc"):
        raise StoreError(self.message)

    def distinct_device_ids(self):
        raise StoreError(self.message)


def make_settings(**overrides) -> Settings:
    values = {"database_url": "sqlite://", "enable_metrics": False}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def broken_store() -> BrokenStore:
    return BrokenStore()


@pytest.fixture
def make_client():
    """Factory for apps built with overridden settings and/or an injected store."""
    clients = []

    def _make(store=None, **overrides) -> TestClient:
        test_client = TestClient(create_app(make_settings(**overrides), store=store))
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture
def post_reading():
    def _post(client: TestClient, path: str = "/sensors", **fields):
        payload = {
            "device_id": "dev-1",
            "temperature": 20.0,
            "humidity": 50.0,
            "ethylene_level": 1.0,
        }
        payload.update(fields)
        resp = client.post(path, json=payload)
        assert resp.status_code == 200, resp.text
        return resp

    return _post
