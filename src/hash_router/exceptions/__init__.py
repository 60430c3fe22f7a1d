"""Exceptions subpackage."""

from hash_router.exceptions.exceptions import (
    AlreadyExistsError,
    AmbiguousOutcomeError,
    HashRouterError,
    MalformedRowError,
    MissingRequiredConfigError,
    StoreError,
    TransportFailureError,
)
from hash_router.exceptions.http_exceptions import (
    HttpConnectionError,
    HttpError,
    HttpStatusError,
    HttpTimeoutError,
)
from hash_router.exceptions.router_exceptions import (
    AmbiguousOutcome,
    ChannelIdInvalid,
    GuildIdInvalid,
    MessageIdAlreadyRouted,
    MessageIdInvalid,
    MessageIdNotFound,
    RouterError,
    RouterErrorKind,
    RoutingIntegrityViolation,
    StoreUnavailable,
    TradeHashAlreadyRouted,
    TradeHashInvalid,
    TradeHashNotFound,
)

__all__ = [
    "AlreadyExistsError",
    "AmbiguousOutcome",
    "AmbiguousOutcomeError",
    "ChannelIdInvalid",
    "GuildIdInvalid",
    "HashRouterError",
    "HttpConnectionError",
    "HttpError",
    "HttpStatusError",
    "HttpTimeoutError",
    "MalformedRowError",
    "MessageIdAlreadyRouted",
    "MessageIdInvalid",
    "MessageIdNotFound",
    "MissingRequiredConfigError",
    "RouterError",
    "RouterErrorKind",
    "RoutingIntegrityViolation",
    "StoreError",
    "StoreUnavailable",
    "TradeHashAlreadyRouted",
    "TradeHashInvalid",
    "TradeHashNotFound",
    "TransportFailureError",
]
