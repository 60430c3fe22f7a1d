"""Router-level exceptions exposed to callers.

Callers match on the exception class or on ``error.kind``; ``str(error)`` is a
one-line message without identifiers. The store failure that caused the error,
when there is one, is available as ``error.cause`` (and ``__cause__``).
"""

from __future__ import annotations

from enum import Enum

from hash_router.exceptions.exceptions import HashRouterError


class RouterErrorKind(str, Enum):
    """Stable error kinds returned by HashRouter."""

    TRADE_HASH_NOT_FOUND = "trade_hash_not_found"
    TRADE_HASH_INVALID = "trade_hash_invalid"
    TRADE_HASH_ALREADY_ROUTED = "trade_hash_already_routed"
    MESSAGE_ID_NOT_FOUND = "message_id_not_found"
    MESSAGE_ID_INVALID = "message_id_invalid"
    MESSAGE_ID_ALREADY_ROUTED = "message_id_already_routed"
    CHANNEL_ID_INVALID = "channel_id_invalid"
    GUILD_ID_INVALID = "guild_id_invalid"
    ROUTING_INTEGRITY_VIOLATION = "routing_integrity_violation"
    STORE_UNAVAILABLE = "store_unavailable"
    AMBIGUOUS_OUTCOME = "ambiguous_outcome"


ERROR_MESSAGES: dict[RouterErrorKind, str] = {
    RouterErrorKind.TRADE_HASH_NOT_FOUND: "Trade hash not found.",
    RouterErrorKind.TRADE_HASH_INVALID: "Trade hash is invalid.",
    RouterErrorKind.TRADE_HASH_ALREADY_ROUTED: "Trade hash has already been routed.",
    RouterErrorKind.MESSAGE_ID_NOT_FOUND: "Message ID not found.",
    RouterErrorKind.MESSAGE_ID_INVALID: "Message ID is invalid.",
    RouterErrorKind.MESSAGE_ID_ALREADY_ROUTED: "Message ID has already been routed.",
    RouterErrorKind.CHANNEL_ID_INVALID: "Channel ID is invalid.",
    RouterErrorKind.GUILD_ID_INVALID: "Guild ID is invalid.",
    RouterErrorKind.ROUTING_INTEGRITY_VIOLATION: "More than one route is stored for the same key.",
    RouterErrorKind.STORE_UNAVAILABLE: "Routing store is unavailable.",
    RouterErrorKind.AMBIGUOUS_OUTCOME: "Routing store did not confirm whether the write succeeded.",
}


class RouterError(HashRouterError):
    """Base exception for HashRouter operations. Subclasses fix ``kind``."""

    kind: RouterErrorKind

    def __init__(self, *, cause: Exception | None = None) -> None:
        super().__init__(ERROR_MESSAGES[self.kind])
        self.cause = cause


# Domain errors


class TradeHashNotFound(RouterError):
    kind = RouterErrorKind.TRADE_HASH_NOT_FOUND


class TradeHashInvalid(RouterError):
    kind = RouterErrorKind.TRADE_HASH_INVALID


class TradeHashAlreadyRouted(RouterError):
    kind = RouterErrorKind.TRADE_HASH_ALREADY_ROUTED


class MessageIdNotFound(RouterError):
    kind = RouterErrorKind.MESSAGE_ID_NOT_FOUND


class MessageIdInvalid(RouterError):
    kind = RouterErrorKind.MESSAGE_ID_INVALID


class MessageIdAlreadyRouted(RouterError):
    kind = RouterErrorKind.MESSAGE_ID_ALREADY_ROUTED


class ChannelIdInvalid(RouterError):
    kind = RouterErrorKind.CHANNEL_ID_INVALID


class GuildIdInvalid(RouterError):
    kind = RouterErrorKind.GUILD_ID_INVALID


class RoutingIntegrityViolation(RouterError):
    """More than one stored record matched a key that must be unique."""

    kind = RouterErrorKind.ROUTING_INTEGRITY_VIOLATION


# Infrastructure errors


class StoreUnavailable(RouterError):
    """Store could not be reached, refused the request or returned unusable data."""

    kind = RouterErrorKind.STORE_UNAVAILABLE


class AmbiguousOutcome(RouterError):
    """A register call timed out and the write may or may not have landed.

    Retrying register is safe: a landed write makes the retry fail with
    TradeHashAlreadyRouted, a lost one makes it succeed.
    """

    kind = RouterErrorKind.AMBIGUOUS_OUTCOME
