# -*- coding: utf-8 -*-
"""Abstract interface for association storage (in-memory, Supabase, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from hash_router.models.association_record import AssociationRecord


@dataclass(frozen=True, slots=True)
class InsertResult:
    """Outcome of a successful insert_if_unique."""

    record: AssociationRecord
    """The record as stored."""
    row_id: str | None = None
    """Store-assigned row identifier, when the backend exposes one."""
    reconciled: bool = False
    """True when the write timed out and a follow-up read confirmed it landed."""


class IAssociationStore(ABC):
    """Interface for persisting AssociationRecord with at-most-one record per key.

    Keys are trade_hash and message_id. Implementations must enforce uniqueness
    atomically (server-side constraint, or a lock for in-process stores) so that
    concurrent inserts for one key have exactly one winner.
    """

    @abstractmethod
    async def insert_if_unique(self, record: AssociationRecord) -> InsertResult:
        """Write the record unless its trade_hash or message_id is already stored.

        Raises:
            AlreadyExistsError: A record with the same key exists; nothing was written.
            TransportFailureError: The store was unreachable or refused the request; nothing was written.
            AmbiguousOutcomeError: The write may or may not have landed.
        """
        ...

    @abstractmethod
    async def find_by_trade_hash(self, trade_hash: str) -> list[AssociationRecord]:
        """Return every record whose trade_hash equals the argument ([] when none).

        Raises:
            ValueError: If trade_hash is empty.
            TransportFailureError: The store was unreachable or refused the request.
            MalformedRowError: A returned row could not be parsed.
        """
        ...

    @abstractmethod
    async def find_by_message_id(self, message_id: int) -> list[AssociationRecord]:
        """Return every record whose message_id equals the argument ([] when none)."""
        ...

    async def ping(self) -> None:
        """Check that the store is reachable. Default is a no-op."""
        return None
