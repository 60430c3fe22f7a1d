"""HashRouter: register Discord messages against trade hashes and look them up."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from structlog.contextvars import bound_contextvars

from hash_router.exceptions import (
    AlreadyExistsError,
    AmbiguousOutcome,
    AmbiguousOutcomeError,
    ChannelIdInvalid,
    GuildIdInvalid,
    MessageIdAlreadyRouted,
    MessageIdInvalid,
    MessageIdNotFound,
    RoutingIntegrityViolation,
    StoreError,
    StoreUnavailable,
    TradeHashAlreadyRouted,
    TradeHashInvalid,
    TradeHashNotFound,
)
from hash_router.models.association_record import AssociationRecord
from hash_router.persistence.repositories.interfaces.association_store import (
    IAssociationStore,
)
from hash_router.utils.validation import is_snowflake, mask_trade_hash, normalize_trade_hash


def _require_trade_hash(trade_hash: Any) -> str:
    normalized = normalize_trade_hash(trade_hash)
    if normalized is None:
        raise TradeHashInvalid()
    return normalized


class HashRouter:
    """Public routing surface over an IAssociationStore.

    Inputs are validated before any store call. Store failures are re-raised as
    RouterError subclasses with the store error kept as ``cause``. The router
    holds no mutable state; concurrent registrations for one hash are settled
    by the store's uniqueness guarantee.
    """

    def __init__(
        self,
        association_store: IAssociationStore,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            association_store: Long-lived store handle (injected).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._store = association_store
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def register(
        self,
        message_id: int,
        channel_id: int,
        guild_id: int,
        trade_hash: str,
    ) -> str:
        """Route a Discord message to a trade hash.

        Args:
            message_id: Discord message snowflake.
            channel_id: Discord channel snowflake.
            guild_id: Discord guild snowflake.
            trade_hash: Non-empty trade hash (surrounding whitespace is stripped).

        Returns:
            The trade hash that was stored, as confirmation.

        Raises:
            TradeHashInvalid, MessageIdInvalid, ChannelIdInvalid, GuildIdInvalid:
                Bad input; the store is not called.
            TradeHashAlreadyRouted: The hash is already routed to a message.
            MessageIdAlreadyRouted: The message is already routed to a hash.
            AmbiguousOutcome: The write may or may not have landed; retry is safe.
            StoreUnavailable: Any other store failure.
        """
        normalized_hash = _require_trade_hash(trade_hash)
        if not is_snowflake(message_id):
            raise MessageIdInvalid()
        if not is_snowflake(channel_id):
            raise ChannelIdInvalid()
        if not is_snowflake(guild_id):
            raise GuildIdInvalid()

        record = AssociationRecord(
            message_id=message_id,
            channel_id=channel_id,
            guild_id=guild_id,
            trade_hash=normalized_hash,
        )
        with bound_contextvars(trade_hash_masked=mask_trade_hash(normalized_hash)):
            try:
                result = await self._store.insert_if_unique(record)
            except AlreadyExistsError as e:
                self._logger.info("router_register_conflict", conflict_key=e.key)
                if e.key == "message_id":
                    raise MessageIdAlreadyRouted(cause=e) from e
                raise TradeHashAlreadyRouted(cause=e) from e
            except AmbiguousOutcomeError as e:
                self._logger.warning("router_register_ambiguous")
                raise AmbiguousOutcome(cause=e) from e
            except StoreError as e:
                self._logger.error(
                    "router_register_store_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise StoreUnavailable(cause=e) from e

            self._logger.info(
                "router_register_succeeded",
                row_id=result.row_id,
                reconciled=result.reconciled,
            )
        return normalized_hash

    async def lookup_by_trade_hash(self, trade_hash: str) -> list[AssociationRecord]:
        """Return the records routed to trade_hash (exactly one on success).

        Raises:
            TradeHashInvalid: Empty or non-string hash; the store is not called.
            TradeHashNotFound: Nothing is routed to the hash.
            RoutingIntegrityViolation: More than one record holds the hash.
            StoreUnavailable: The store failed.
        """
        normalized_hash = _require_trade_hash(trade_hash)
        with bound_contextvars(trade_hash_masked=mask_trade_hash(normalized_hash)):
            try:
                records = await self._store.find_by_trade_hash(normalized_hash)
            except StoreError as e:
                self._logger.error(
                    "router_lookup_store_failed",
                    lookup_key="trade_hash",
                    error_type=type(e).__name__,
                )
                raise StoreUnavailable(cause=e) from e

            if not records:
                self._logger.debug("router_lookup_not_found", lookup_key="trade_hash")
                raise TradeHashNotFound()
            if len(records) > 1:
                self._logger.error(
                    "router_lookup_integrity_violation",
                    lookup_key="trade_hash",
                    record_count=len(records),
                )
                raise RoutingIntegrityViolation()
        return records

    async def lookup_by_message_id(self, message_id: int) -> AssociationRecord:
        """Return the record routed from a Discord message.

        Raises:
            MessageIdInvalid: Not a valid snowflake; the store is not called.
            MessageIdNotFound: The message is not routed.
            RoutingIntegrityViolation: More than one record holds the message id.
            StoreUnavailable: The store failed.
        """
        if not is_snowflake(message_id):
            raise MessageIdInvalid()
        try:
            records = await self._store.find_by_message_id(message_id)
        except StoreError as e:
            self._logger.error(
                "router_lookup_store_failed",
                lookup_key="message_id",
                error_type=type(e).__name__,
            )
            raise StoreUnavailable(cause=e) from e

        if not records:
            raise MessageIdNotFound()
        if len(records) > 1:
            self._logger.error(
                "router_lookup_integrity_violation",
                lookup_key="message_id",
                record_count=len(records),
            )
            raise RoutingIntegrityViolation()
        return records[0]
