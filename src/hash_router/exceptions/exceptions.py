"""Base, configuration and store exceptions."""

from __future__ import annotations


class HashRouterError(Exception):
    """Base exception for hash router errors."""

    pass


class MissingRequiredConfigError(HashRouterError):
    """Raised at startup when a required configuration value is missing."""

    pass


class StoreError(HashRouterError):
    """Base exception for association store failures.

    The underlying exception (HTTP error, parse error, ...) is kept in ``cause``
    and chained as ``__cause__`` by the raiser.
    """

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class AlreadyExistsError(StoreError):
    """Raised when an insert hits the uniqueness constraint. Nothing was written."""

    def __init__(
        self,
        message: str = "Record already exists",
        *,
        key: str = "trade_hash",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.key = key
        """Column whose uniqueness was violated (trade_hash or message_id)."""


class TransportFailureError(StoreError):
    """Raised when the store could not be reached or refused the request. Nothing was written."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code


class AmbiguousOutcomeError(StoreError):
    """Raised when an insert may or may not have been written (timeout, dropped connection)."""

    pass


class MalformedRowError(StoreError):
    """Raised when the store returns a row that cannot be parsed into a record."""

    pass
