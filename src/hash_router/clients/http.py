# -*- coding: utf-8 -*-
"""Async HTTP client with retries for reads and single-shot writes."""

from __future__ import annotations

import asyncio
import random
import uuid
import aiohttp
import structlog
from typing import Any, Callable, Dict, Mapping, Optional
from structlog.contextvars import bound_contextvars

from hash_router.config import Settings
from hash_router.exceptions import (
    HttpConnectionError,
    HttpError,
    HttpStatusError,
    HttpTimeoutError,
)


async def _read_payload(response: aiohttp.ClientResponse) -> Any:
    """Decode a JSON body; fall back to text. Empty body gives None.

    Bytes that are not valid in the declared charset are replaced, so an
    undecodable body never escapes as UnicodeDecodeError.
    """
    try:
        return await response.json(content_type=None)
    except ValueError:
        return await response.text(errors="replace")


class AsyncHttpClient:
    """Async HTTP client for the store REST API.

    GET requests are retried on transport errors, 429 and 5xx. POST requests
    are attempted once: a write that timed out must be reported as such, not
    silently repeated.

    Injects Settings and optionally an aiohttp.ClientSession. If no session
    is provided, one is created and must be closed via aclose() or used
    as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (supabase.timeout_seconds, supabase.max_retries).
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.supabase.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff with jitter, capped at 4 seconds."""
        base = min(4.0, 0.25 * (2**attempt))
        return base + random.uniform(0.0, 0.15)

    async def _wait_before_retry(
        self,
        attempt: int,
        max_retries: int,
        retry_after: Optional[float] = None,
    ) -> None:
        """Sleep before the next attempt; no sleep after the last one."""
        if attempt >= max_retries - 1:
            return
        if retry_after is not None and retry_after > 0:
            await asyncio.sleep(retry_after)
        else:
            await asyncio.sleep(self._backoff_delay(attempt))

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Perform a GET request and return the decoded body.

        Retries transport errors, 429 (honouring Retry-After) and 5xx. Other
        4xx responses are raised at once.

        Raises:
            HttpStatusError: Non-2xx response (after retries for 429/5xx).
            HttpConnectionError: Could not connect after all retries.
            HttpTimeoutError: Timed out or disconnected after all retries.
        """
        params = params or {}
        request_id = uuid.uuid4().hex[:12]
        max_retries = self._settings.supabase.max_retries
        last_error: Optional[HttpError] = None

        with bound_contextvars(
            http_url=url,
            http_request_id=request_id,
            http_max_retries=max_retries,
        ):
            for attempt in range(max_retries):
                with bound_contextvars(http_attempt=attempt + 1):
                    try:
                        session = await self._get_session()
                        async with session.get(url, params=params, headers=headers) as response:
                            if response.status == 429:
                                retry_after: Optional[float] = None
                                header = response.headers.get("Retry-After")
                                if header:
                                    try:
                                        retry_after = float(header)
                                    except ValueError:
                                        pass
                                self._logger.warning(
                                    "http_get_rate_limited",
                                    http_status_code=429,
                                    http_retry_after_seconds=retry_after,
                                )
                                last_error = HttpStatusError(
                                    f"GET rate limited: {url}", url=url, status_code=429
                                )
                                await self._wait_before_retry(attempt, max_retries, retry_after)
                                continue

                            payload = await _read_payload(response)
                            if response.status >= 400:
                                raise HttpStatusError(
                                    f"GET {url} returned {response.status}",
                                    url=url,
                                    status_code=response.status,
                                    payload=payload,
                                )
                            return payload
                    except HttpStatusError as e:
                        if e.status_code is None or e.status_code < 500:
                            self._logger.warning(
                                "http_get_rejected",
                                http_status_code=e.status_code,
                            )
                            raise
                        last_error = e
                        self._logger.debug(
                            "http_get_retry",
                            error_type=type(e).__name__,
                            http_status_code=e.status_code,
                        )
                        await self._wait_before_retry(attempt, max_retries)
                    except aiohttp.ClientConnectorError as e:
                        last_error = HttpConnectionError(
                            f"GET could not connect: {url}", url=url, cause=e
                        )
                        self._logger.debug(
                            "http_get_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )
                        await self._wait_before_retry(attempt, max_retries)
                    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                        last_error = HttpTimeoutError(
                            f"GET timed out or disconnected: {url}", url=url, cause=e
                        )
                        self._logger.debug(
                            "http_get_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )
                        await self._wait_before_retry(attempt, max_retries)

            self._logger.error(
                "http_get_failed",
                http_status_code=last_error.status_code if last_error else None,
                http_attempts=max_retries,
                error_type=type(last_error).__name__ if last_error else None,
            )
            if last_error is None:
                last_error = HttpError(f"GET failed after {max_retries} retries: {url}", url=url)
            raise last_error from last_error.cause

    async def post(
        self,
        url: str,
        *,
        json: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Perform a single POST request with a JSON body and return the decoded body.

        Raises:
            HttpStatusError: The server answered with a non-2xx status.
            HttpConnectionError: No connection was made; the request was not sent.
            HttpTimeoutError: Timed out or disconnected after sending; outcome unknown.
        """
        request_id = uuid.uuid4().hex[:12]

        with bound_contextvars(http_url=url, http_request_id=request_id):
            try:
                session = await self._get_session()
                async with session.post(url, json=json, headers=headers) as response:
                    payload = await _read_payload(response)
                    if response.status >= 400:
                        self._logger.debug(
                            "http_post_rejected",
                            http_status_code=response.status,
                        )
                        raise HttpStatusError(
                            f"POST {url} returned {response.status}",
                            url=url,
                            status_code=response.status,
                            payload=payload,
                        )
                    return payload
            except aiohttp.ClientConnectorError as e:
                self._logger.warning(
                    "http_post_connect_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise HttpConnectionError(
                    f"POST could not connect: {url}", url=url, cause=e
                ) from e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                self._logger.warning(
                    "http_post_outcome_unknown",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise HttpTimeoutError(
                    f"POST timed out or disconnected: {url}", url=url, cause=e
                ) from e
