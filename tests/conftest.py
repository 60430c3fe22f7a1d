# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from hash_router.config import Settings
from hash_router.models.association_record import AssociationRecord
from hash_router.persistence.repositories.in_memory.association_store import (
    InMemoryAssociationStore,
)
from hash_router.services.router.hash_router import HashRouter


@pytest.fixture
def trade_hash() -> str:
    """Default trade hash used by tests."""
    return "0x9f2c4e7a1b3d5f60718293a4b5c6d7e8f9012345"


@pytest.fixture
def message_id() -> int:
    return 1212345678901234567


@pytest.fixture
def channel_id() -> int:
    return 1101234567890123456


@pytest.fixture
def guild_id() -> int:
    return 1001234567890123456


@pytest.fixture
def record_factory(
    message_id: int,
    channel_id: int,
    guild_id: int,
    trade_hash: str,
) -> Callable[..., AssociationRecord]:
    """Build AssociationRecord with sensible defaults and easy overrides."""

    def _build(**overrides: Any) -> AssociationRecord:
        return AssociationRecord(
            message_id=overrides.pop("message_id", message_id),
            channel_id=overrides.pop("channel_id", channel_id),
            guild_id=overrides.pop("guild_id", guild_id),
            trade_hash=overrides.pop("trade_hash", trade_hash),
        )

    return _build


@pytest.fixture
def memory_store() -> InMemoryAssociationStore:
    """Fresh in-memory association store per test."""
    return InMemoryAssociationStore()


@pytest.fixture
def router(memory_store: InMemoryAssociationStore) -> HashRouter:
    """HashRouter over the in-memory store."""
    return HashRouter(association_store=memory_store)


@pytest.fixture
def supabase_settings() -> Settings:
    """Settings pointing at a fake Supabase project (no .env lookup)."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        supabase={
            "public_url": "https://example.supabase.co/",
            "anon_key": "anon-key",
            "max_retries": 1,
        },
    )
