"""HTTP transport exceptions raised by AsyncHttpClient."""

from __future__ import annotations

from typing import Any


class HttpError(Exception):
    """Base exception for HTTP requests that did not produce a usable response."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class HttpStatusError(HttpError):
    """Raised when the server answered with a non-2xx status. ``payload`` is the decoded body, if any."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        payload: Any = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, url=url, status_code=status_code, cause=cause)
        self.payload = payload


class HttpConnectionError(HttpError):
    """Raised when no connection could be established (the request was never sent)."""


class HttpTimeoutError(HttpError):
    """Raised when the request timed out or the connection dropped after it was sent."""
