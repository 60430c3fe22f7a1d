# -*- coding: utf-8 -*-
"""Supabase (PostgREST) association store.

Expects a table created out of band, e.g.::

    create table hash_router (
        id bigint generated always as identity primary key,
        message_id bigint not null unique,
        channel_id bigint not null,
        guild_id bigint not null,
        trade_hash text not null unique
    );

Uniqueness is enforced by the table constraints; a conflicting insert comes
back as 409 / SQLSTATE 23505 and nothing is overwritten.
"""

from __future__ import annotations

import re
import structlog
from typing import TYPE_CHECKING, Any, Callable, Optional, cast
from structlog.contextvars import bound_contextvars

from hash_router.config import Settings
from hash_router.exceptions import (
    AlreadyExistsError,
    AmbiguousOutcomeError,
    HttpConnectionError,
    HttpError,
    HttpStatusError,
    HttpTimeoutError,
    MalformedRowError,
    StoreError,
    TransportFailureError,
)
from hash_router.models.association_record import AssociationRecord
from hash_router.persistence.repositories.interfaces.association_store import (
    IAssociationStore,
    InsertResult,
)
from hash_router.utils.validation import mask_trade_hash

if TYPE_CHECKING:
    from hash_router.clients.http import AsyncHttpClient

UNIQUE_VIOLATION = "23505"
# Gateway answers for a backend that may have committed before the reply was lost.
OUTCOME_UNKNOWN_STATUSES = frozenset({408, 502, 504})
_CONFLICT_KEY_RE = re.compile(r"Key \((\w+)\)")


def _is_unique_violation(error: HttpStatusError) -> bool:
    """True for PostgREST unique-constraint rejections."""
    payload = error.payload
    if isinstance(payload, dict) and payload.get("code"):
        return payload.get("code") == UNIQUE_VIOLATION
    return error.status_code == 409


def _conflicting_key(payload: Any) -> str:
    """Column named in a unique violation ("Key (message_id)=(...) already exists.")."""
    if isinstance(payload, dict):
        details = str(payload.get("details") or "")
        match = _CONFLICT_KEY_RE.search(details)
        if match and match.group(1) in ("trade_hash", "message_id"):
            return match.group(1)
        if "message_id" in str(payload.get("message") or ""):
            return "message_id"
    return "trade_hash"


class SupabaseAssociationStore(IAssociationStore):
    """IAssociationStore backed by a Supabase table through the PostgREST API."""

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the store.

        Args:
            http_client: Async HTTP client (long-lived, shared).
            settings: Application settings (uses settings.supabase).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _table_url(self) -> str:
        return f"{self._settings.supabase.rest_url}/{self._settings.supabase.table}"

    def _headers(self, **extra: str) -> dict[str, str]:
        key = self._settings.supabase.anon_key or ""
        headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        headers.update(extra)
        return headers

    async def insert_if_unique(self, record: AssociationRecord) -> InsertResult:
        """POST the record; a unique violation becomes AlreadyExistsError.

        A timeout or a gateway status (408, 502, 504) is followed by one read
        of the trade hash: if our record is there the insert succeeded, if
        another record holds the hash it is a conflict, otherwise the outcome
        stays ambiguous.
        """
        with bound_contextvars(
            trade_hash_masked=mask_trade_hash(record.trade_hash),
            supabase_table=self._settings.supabase.table,
        ):
            try:
                payload = await self._http.post(
                    self._table_url(),
                    json=record.to_row(),
                    headers=self._headers(Prefer="return=representation"),
                )
            except HttpStatusError as e:
                if _is_unique_violation(e):
                    key = _conflicting_key(e.payload)
                    self._logger.info("supabase_insert_conflict", conflict_key=key)
                    raise AlreadyExistsError(
                        f"{key} already stored", key=key, cause=e
                    ) from e
                if e.status_code in OUTCOME_UNKNOWN_STATUSES:
                    return await self._reconcile_insert(record, e)
                self._logger.error(
                    "supabase_insert_rejected",
                    http_status_code=e.status_code,
                )
                raise TransportFailureError(
                    "Insert rejected by store", status_code=e.status_code, cause=e
                ) from e
            except HttpConnectionError as e:
                self._logger.error("supabase_insert_unreachable", error_message=str(e))
                raise TransportFailureError("Store unreachable", cause=e) from e
            except HttpTimeoutError as e:
                return await self._reconcile_insert(record, e)

            return self._insert_result(record, payload)

    def _insert_result(self, record: AssociationRecord, payload: Any) -> InsertResult:
        rows = cast(list[Any], payload) if isinstance(payload, list) else []
        row = rows[0] if rows and isinstance(rows[0], dict) else None
        if row is None:
            # return=representation was ignored (e.g. a proxy); the 2xx still means written
            return InsertResult(record=record)
        try:
            stored = AssociationRecord.from_row(row)
        except ValueError as e:
            raise MalformedRowError("Store returned an unreadable row", cause=e) from e
        row_id = row.get("id")
        return InsertResult(record=stored, row_id=str(row_id) if row_id is not None else None)

    async def _reconcile_insert(
        self, record: AssociationRecord, error: HttpTimeoutError | HttpStatusError
    ) -> InsertResult:
        self._logger.warning("supabase_insert_outcome_unknown", error_message=str(error))
        try:
            existing = await self.find_by_trade_hash(record.trade_hash)
        except StoreError as read_error:
            self._logger.warning(
                "supabase_insert_reconcile_failed",
                error_type=type(read_error).__name__,
            )
            raise AmbiguousOutcomeError(
                "Insert outcome unknown", cause=error
            ) from error

        # An identical record from another caller is indistinguishable from ours.
        if record in existing:
            self._logger.info("supabase_insert_reconciled", outcome="written")
            return InsertResult(record=record, reconciled=True)
        if existing:
            self._logger.info("supabase_insert_reconciled", outcome="conflict")
            raise AlreadyExistsError(
                "trade_hash already stored", key="trade_hash", cause=error
            ) from error
        # Not visible yet; the request may still commit.
        raise AmbiguousOutcomeError("Insert outcome unknown", cause=error) from error

    async def find_by_trade_hash(self, trade_hash: str) -> list[AssociationRecord]:
        """Select rows where trade_hash = value."""
        if not trade_hash:
            raise ValueError("trade_hash must be non-empty")
        return await self._select_eq("trade_hash", trade_hash)

    async def find_by_message_id(self, message_id: int) -> list[AssociationRecord]:
        """Select rows where message_id = value."""
        return await self._select_eq("message_id", str(message_id))

    async def _select_eq(self, column: str, value: str) -> list[AssociationRecord]:
        params = {"select": "*", column: f"eq.{value}"}
        with bound_contextvars(
            supabase_table=self._settings.supabase.table,
            supabase_filter_column=column,
        ):
            try:
                payload = await self._http.get(
                    self._table_url(), params=params, headers=self._headers()
                )
            except HttpError as e:
                self._logger.error(
                    "supabase_select_failed",
                    error_type=type(e).__name__,
                    http_status_code=e.status_code,
                )
                raise TransportFailureError(
                    "Select failed", status_code=e.status_code, cause=e
                ) from e

            if not isinstance(payload, list):
                self._logger.warning(
                    "supabase_select_non_list",
                    supabase_response_type=type(payload).__name__,
                )
                raise MalformedRowError("Store returned a non-list select response")
            try:
                return [AssociationRecord.from_row(row) for row in cast(list[Any], payload)]
            except (ValueError, AttributeError) as e:
                raise MalformedRowError("Store returned an unreadable row", cause=e) from e

    async def ping(self) -> None:
        """Read at most one row to check URL, key and table."""
        try:
            await self._http.get(
                self._table_url(),
                params={"select": "trade_hash", "limit": "1"},
                headers=self._headers(),
            )
        except HttpError as e:
            self._logger.error(
                "supabase_ping_failed",
                error_type=type(e).__name__,
                http_status_code=e.status_code,
            )
            raise TransportFailureError(
                "Store ping failed", status_code=e.status_code, cause=e
            ) from e
