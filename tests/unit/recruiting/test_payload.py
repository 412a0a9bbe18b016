"""Unit tests for the web payload service."""

import json
from datetime import datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from headhunter.infrastructure.database.mappers import map_entry_to_record
from headhunter.recruiting.blacklist import BlacklistStore
from headhunter.recruiting.payload import PAYLOAD_SCHEMA, PayloadService
from headhunter.shared.constants import (
    BLACKLIST_KEY,
    JSON_STORE_KEY,
    LAST_PAYLOAD_TIMESTAMP_KEY,
)
from tests.factories import BlacklistFactory, RecruitFactory


@pytest.fixture
def service(row_store, properties, chunked_cache, locks) -> PayloadService:
    blacklist = BlacklistStore(properties)
    return PayloadService(row_store, blacklist, chunked_cache, properties, locks)


@pytest.mark.asyncio
async def test_refresh_builds_matrix_envelope(service, row_store):
    row_store.write_rows(
        [RecruitFactory.row(tag="#ABC", name="Ann", trophies=6000, perf_score=95)]
    )

    payload = json.loads(await service.refresh())

    assert payload["success"] is True
    assert payload["error"] is None
    data = payload["data"]
    assert data["format"] == "matrix"
    assert data["schema"] == PAYLOAD_SCHEMA
    assert data["hh"] == [
        ["ABC", "Ann", 6000, 95, 400, 0, "2025-11-03T00:00:00+00:00", 120]
    ]


@pytest.mark.asyncio
async def test_invited_and_blacklisted_rows_are_hidden(service, row_store, properties):
    future = datetime.now(timezone.utc) + timedelta(days=3)
    properties.set_chunked(
        BLACKLIST_KEY,
        {"#BL1": map_entry_to_record(BlacklistFactory.entry("#BL1", expiry=future))},
    )
    row_store.write_rows(
        [
            RecruitFactory.row(tag="#KEEP"),
            RecruitFactory.row(tag="#INV", invited=True),
            RecruitFactory.row(tag="#BL1"),
            RecruitFactory.row(tag="#AB"),
        ]
    )

    payload = json.loads(await service.refresh())

    assert [row[0] for row in payload["data"]["hh"]] == ["KEEP"]


@pytest.mark.asyncio
async def test_refresh_stores_payload_and_timestamp(service, chunked_cache, properties):
    payload_str = await service.refresh()

    assert chunked_cache.get_large(JSON_STORE_KEY) == payload_str
    timestamp = json.loads(payload_str)["data"]["timestamp"]
    assert properties.get(LAST_PAYLOAD_TIMESTAMP_KEY) == str(timestamp)


@pytest.mark.asyncio
async def test_get_serves_cache_until_forced(service, chunked_cache, mocker):
    chunked_cache.put_large(JSON_STORE_KEY, '{"success": true, "cached": 1}')
    refresh = mocker.spy(service, "refresh")

    cached = await service.get()
    forced = await service.get(force_refresh=True)

    assert json.loads(cached)["cached"] == 1
    assert "cached" not in json.loads(forced)
    assert refresh.call_count == 1


@pytest.mark.asyncio
async def test_get_regenerates_on_cache_miss(service):
    payload = json.loads(await service.get())

    assert payload["success"] is True
    assert payload["data"]["hh"] == []


@pytest.mark.asyncio
async def test_generation_failure_returns_error_envelope(service, mocker):
    mocker.patch.object(
        service.row_store, "read_rows", side_effect=RuntimeError("db locked")
    )

    payload = json.loads(await service.refresh())

    assert payload["success"] is False
    assert payload["data"] is None
    assert payload["error"]["code"] == "PAYLOAD_GENERATION_FAILED"
    assert "db locked" in payload["error"]["message"]


@pytest.mark.asyncio
@freeze_time("2025-11-03 12:00:00")
async def test_timestamp_is_epoch_milliseconds(service):
    payload = json.loads(await service.refresh())

    assert payload["data"]["timestamp"] == 1_762_171_200_000
