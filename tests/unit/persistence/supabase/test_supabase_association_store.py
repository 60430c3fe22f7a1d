# -*- coding: utf-8 -*-
"""Unit tests for SupabaseAssociationStore (HTTP client faked)."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from hash_router.config import Settings
from hash_router.exceptions import (
    AlreadyExistsError,
    AmbiguousOutcomeError,
    HttpConnectionError,
    HttpStatusError,
    HttpTimeoutError,
    MalformedRowError,
    TransportFailureError,
)
from hash_router.models.association_record import AssociationRecord
from hash_router.persistence.repositories.supabase.association_store import (
    SupabaseAssociationStore,
)

TABLE_URL = "https://example.supabase.co/rest/v1/hash_router"


def _store(settings: Settings, **http_methods: Any) -> SupabaseAssociationStore:
    http_client: Any = SimpleNamespace(**http_methods)
    return SupabaseAssociationStore(http_client=http_client, settings=settings)


def _conflict(column: str) -> HttpStatusError:
    return HttpStatusError(
        "POST returned 409",
        status_code=409,
        payload={
            "code": "23505",
            "details": f"Key ({column})=(x) already exists.",
            "hint": None,
            "message": f'duplicate key value violates unique constraint "hash_router_{column}_key"',
        },
    )


async def test_insert_posts_row_with_auth_headers_and_returns_stored_record(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
) -> None:
    record = record_factory()
    post = AsyncMock(return_value=[{"id": 17, **record.to_row()}])
    store = _store(supabase_settings, post=post)

    result = await store.insert_if_unique(record)

    assert result.record == record
    assert result.row_id == "17"
    args, kwargs = post.call_args
    assert args == (TABLE_URL,)
    assert kwargs["json"] == record.to_row()
    assert kwargs["headers"]["apikey"] == "anon-key"
    assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
    assert kwargs["headers"]["Prefer"] == "return=representation"


async def test_insert_without_representation_still_succeeds(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
) -> None:
    store = _store(supabase_settings, post=AsyncMock(return_value=None))

    result = await store.insert_if_unique(record_factory())

    assert result.record == record_factory()
    assert result.row_id is None


@pytest.mark.parametrize("column", ["trade_hash", "message_id"])
async def test_insert_unique_violation_raises_already_exists_with_key(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
    column: str,
) -> None:
    error = _conflict(column)
    store = _store(supabase_settings, post=AsyncMock(side_effect=error))

    with pytest.raises(AlreadyExistsError) as exc_info:
        await store.insert_if_unique(record_factory())

    assert exc_info.value.key == column
    assert exc_info.value.cause is error


async def test_insert_bare_409_is_treated_as_trade_hash_conflict(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
) -> None:
    error = HttpStatusError("409", status_code=409, payload="")
    store = _store(supabase_settings, post=AsyncMock(side_effect=error))

    with pytest.raises(AlreadyExistsError) as exc_info:
        await store.insert_if_unique(record_factory())

    assert exc_info.value.key == "trade_hash"


@pytest.mark.parametrize(
    "error",
    [
        HttpStatusError("401", status_code=401, payload={"message": "Invalid API key"}),
        HttpStatusError("503", status_code=503),
        HttpStatusError("409", status_code=409, payload={"code": "23503"}),
        HttpConnectionError("connection refused"),
    ],
)
async def test_insert_definite_failures_raise_transport_failure(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
    error: Exception,
) -> None:
    store = _store(supabase_settings, post=AsyncMock(side_effect=error))

    with pytest.raises(TransportFailureError) as exc_info:
        await store.insert_if_unique(record_factory())

    assert exc_info.value.cause is error


async def test_insert_timeout_reconciles_to_success_when_record_landed(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
) -> None:
    record = record_factory()
    store = _store(
        supabase_settings,
        post=AsyncMock(side_effect=HttpTimeoutError("timeout")),
        get=AsyncMock(return_value=[record.to_row()]),
    )

    result = await store.insert_if_unique(record)

    assert result.record == record
    assert result.reconciled is True


async def test_insert_timeout_reconciles_to_conflict_when_other_record_holds_hash(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
    message_id: int,
) -> None:
    other = record_factory(message_id=message_id + 1)
    store = _store(
        supabase_settings,
        post=AsyncMock(side_effect=HttpTimeoutError("timeout")),
        get=AsyncMock(return_value=[other.to_row()]),
    )

    with pytest.raises(AlreadyExistsError):
        await store.insert_if_unique(record_factory())


async def test_insert_timeout_stays_ambiguous_when_record_not_visible(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
) -> None:
    timeout = HttpTimeoutError("timeout")
    store = _store(
        supabase_settings,
        post=AsyncMock(side_effect=timeout),
        get=AsyncMock(return_value=[]),
    )

    with pytest.raises(AmbiguousOutcomeError) as exc_info:
        await store.insert_if_unique(record_factory())

    assert exc_info.value.cause is timeout


@pytest.mark.parametrize("status", [408, 502, 504])
async def test_insert_gateway_status_reconciles_to_success_when_record_landed(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
    status: int,
) -> None:
    record = record_factory()
    get = AsyncMock(return_value=[record.to_row()])
    store = _store(
        supabase_settings,
        post=AsyncMock(side_effect=HttpStatusError("gateway", status_code=status)),
        get=get,
    )

    result = await store.insert_if_unique(record)

    assert result.record == record
    assert result.reconciled is True
    get.assert_awaited_once()


@pytest.mark.parametrize("status", [408, 502, 504])
async def test_insert_gateway_status_stays_ambiguous_when_record_not_visible(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
    status: int,
) -> None:
    error = HttpStatusError("gateway", status_code=status)
    store = _store(
        supabase_settings,
        post=AsyncMock(side_effect=error),
        get=AsyncMock(return_value=[]),
    )

    with pytest.raises(AmbiguousOutcomeError) as exc_info:
        await store.insert_if_unique(record_factory())

    assert exc_info.value.cause is error


async def test_insert_timeout_stays_ambiguous_when_reconcile_read_fails(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
) -> None:
    store = _store(
        supabase_settings,
        post=AsyncMock(side_effect=HttpTimeoutError("timeout")),
        get=AsyncMock(side_effect=HttpConnectionError("down")),
    )

    with pytest.raises(AmbiguousOutcomeError):
        await store.insert_if_unique(record_factory())


async def test_insert_with_undecodable_success_body_still_succeeds(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
) -> None:
    store = _store(supabase_settings, post=AsyncMock(return_value="\ufffd\ufffd\ufffd"))

    result = await store.insert_if_unique(record_factory())

    assert result.record == record_factory()
    assert result.row_id is None


async def test_find_by_trade_hash_filters_with_eq(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
    trade_hash: str,
) -> None:
    record = record_factory()
    get = AsyncMock(return_value=[{"id": 1, **record.to_row()}])
    store = _store(supabase_settings, get=get)

    found = await store.find_by_trade_hash(trade_hash)

    assert found == [record]
    args, kwargs = get.call_args
    assert args == (TABLE_URL,)
    assert kwargs["params"] == {"select": "*", "trade_hash": f"eq.{trade_hash}"}


async def test_find_by_trade_hash_returns_all_rows(
    supabase_settings: Settings,
    record_factory: Callable[..., AssociationRecord],
    message_id: int,
) -> None:
    rows = [record_factory().to_row(), record_factory(message_id=message_id + 1).to_row()]
    store = _store(supabase_settings, get=AsyncMock(return_value=rows))

    found = await store.find_by_trade_hash("h")

    assert len(found) == 2


async def test_find_by_trade_hash_empty_result(supabase_settings: Settings) -> None:
    store = _store(supabase_settings, get=AsyncMock(return_value=[]))

    assert await store.find_by_trade_hash("missing") == []


async def test_find_by_trade_hash_rejects_empty_hash(supabase_settings: Settings) -> None:
    get = AsyncMock()
    store = _store(supabase_settings, get=get)

    with pytest.raises(ValueError):
        await store.find_by_trade_hash("")
    get.assert_not_called()


async def test_find_by_message_id_filters_with_eq(
    supabase_settings: Settings,
    message_id: int,
) -> None:
    get = AsyncMock(return_value=[])
    store = _store(supabase_settings, get=get)

    await store.find_by_message_id(message_id)

    assert get.call_args.kwargs["params"] == {"select": "*", "message_id": f"eq.{message_id}"}


async def test_select_http_failure_raises_transport_failure(supabase_settings: Settings) -> None:
    error = HttpStatusError("401", status_code=401)
    store = _store(supabase_settings, get=AsyncMock(side_effect=error))

    with pytest.raises(TransportFailureError) as exc_info:
        await store.find_by_trade_hash("h")

    assert exc_info.value.status_code == 401
    assert exc_info.value.__cause__ is error


@pytest.mark.parametrize(
    "payload",
    [
        {"message": "not a list"},
        [{"message_id": 1}],
        ["row"],
    ],
)
async def test_select_unreadable_payload_raises_malformed_row(
    supabase_settings: Settings,
    payload: Any,
) -> None:
    store = _store(supabase_settings, get=AsyncMock(return_value=payload))

    with pytest.raises(MalformedRowError):
        await store.find_by_trade_hash("h")


async def test_ping_reads_one_row(supabase_settings: Settings) -> None:
    get = AsyncMock(return_value=[])
    store = _store(supabase_settings, get=get)

    await store.ping()

    assert get.call_args.kwargs["params"] == {"select": "trade_hash", "limit": "1"}


async def test_ping_failure_raises_transport_failure(supabase_settings: Settings) -> None:
    store = _store(supabase_settings, get=AsyncMock(side_effect=HttpConnectionError("down")))

    with pytest.raises(TransportFailureError):
        await store.ping()
