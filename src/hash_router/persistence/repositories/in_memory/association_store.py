# -*- coding: utf-8 -*-
"""In-memory association store (keyed by trade_hash, unique on message_id)."""

from __future__ import annotations

import asyncio

from hash_router.exceptions import AlreadyExistsError
from hash_router.models.association_record import AssociationRecord
from hash_router.persistence.repositories.interfaces.association_store import (
    IAssociationStore,
    InsertResult,
)


class InMemoryAssociationStore(IAssociationStore):
    """In-memory implementation of IAssociationStore.

    The check-and-insert runs under an asyncio.Lock, standing in for the
    unique constraints of the remote table. Only safe within one event loop.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._by_hash: dict[str, AssociationRecord] = {}
        self._hash_by_message: dict[int, str] = {}
        self._lock = asyncio.Lock()

    async def insert_if_unique(self, record: AssociationRecord) -> InsertResult:
        """Store the record unless its trade_hash or message_id is taken."""
        async with self._lock:
            if record.trade_hash in self._by_hash:
                raise AlreadyExistsError("trade_hash already stored", key="trade_hash")
            if record.message_id in self._hash_by_message:
                raise AlreadyExistsError("message_id already stored", key="message_id")
            # Yield as a remote write would; the lock keeps this atomic.
            await asyncio.sleep(0)
            self._by_hash[record.trade_hash] = record
            self._hash_by_message[record.message_id] = record.trade_hash
        return InsertResult(record=record, row_id=record.trade_hash)

    async def find_by_trade_hash(self, trade_hash: str) -> list[AssociationRecord]:
        """Return the record for trade_hash as a list ([] when missing)."""
        if not trade_hash:
            raise ValueError("trade_hash must be non-empty")
        record = self._by_hash.get(trade_hash)
        return [record] if record is not None else []

    async def find_by_message_id(self, message_id: int) -> list[AssociationRecord]:
        """Return the record routed from message_id as a list ([] when missing)."""
        trade_hash = self._hash_by_message.get(message_id)
        if trade_hash is None:
            return []
        return [self._by_hash[trade_hash]]

    def __len__(self) -> int:
        return len(self._by_hash)
