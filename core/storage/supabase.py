# =============================================================================
# core/storage/supabase.py - Supabase (PostgREST) Table Store
# =============================================================================
# TableStore backed by the Supabase Postgres database. Constraints,
# defaults, cascades and the updated_at trigger live in the SQL migration;
# this module only translates calls into PostgREST queries and maps
# database errors onto the application's error taxonomy.
# =============================================================================

import logging
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from app.exceptions import ChantsException, ConstraintViolationError, StorageError
from core.storage.base import TableStore
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Postgres SQLSTATE codes surfaced by PostgREST
_CONSTRAINT_CODES = {
    "23502": "not_null",
    "23503": "foreign_key",
    "23505": "unique",
    "23514": "check",
}


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _payload(row: dict[str, Any]) -> dict[str, Any]:
    return {column: _jsonable(value) for column, value in row.items()}


class SupabaseTableStore(TableStore):
    """TableStore that talks to Supabase through the shared service client."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    def _fail(self, table: str, operation: str, error: Exception) -> Exception:
        if isinstance(error, ChantsException):
            return error
        code = getattr(error, "code", None)
        if code in _CONSTRAINT_CODES:
            return ConstraintViolationError(table, _CONSTRAINT_CODES[code], str(getattr(error, "message", error)))
        logger.error(f"Supabase {operation} on {table} failed: {error}")
        return StorageError(f"{operation} {table}", str(error))

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def select(
        self,
        table: str,
        filters: dict[str, Any],
        order_by: str | None = None,
    ) -> list[dict[str, Any]]:
        query = self.client.table(table).select("*")
        for column, value in filters.items():
            query = query.eq(column, _jsonable(value))
        if order_by:
            query = query.order(order_by)

        try:
            response = query.execute()
        except Exception as e:
            raise self._fail(table, "select", e)
        return response.data or []

    def get(self, table: str, key_column: str, key: Any) -> dict[str, Any] | None:
        try:
            response = (
                self.client.table(table)
                .select("*")
                .eq(key_column, _jsonable(key))
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise self._fail(table, "select", e)
        rows = response.data or []
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert_many(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not rows:
            return []

        # One request = one INSERT statement, so the batch is atomic
        try:
            response = (
                self.client.table(table)
                .insert([_payload(row) for row in rows])
                .execute()
            )
        except Exception as e:
            raise self._fail(table, "insert", e)

        logger.debug(f"Inserted {len(response.data or [])} row(s) into {table}")
        return response.data or []

    def update(
        self,
        table: str,
        key_column: str,
        key: Any,
        fields: dict[str, Any],
    ) -> dict[str, Any] | None:
        try:
            response = (
                self.client.table(table)
                .update(_payload(fields))
                .eq(key_column, _jsonable(key))
                .execute()
            )
        except Exception as e:
            raise self._fail(table, "update", e)
        rows = response.data or []
        return rows[0] if rows else None

    def delete(self, table: str, key_column: str, keys: list[Any]) -> int:
        if not keys:
            return 0
        try:
            response = (
                self.client.table(table)
                .delete()
                .in_(key_column, [_jsonable(k) for k in keys])
                .execute()
            )
        except Exception as e:
            raise self._fail(table, "delete", e)
        return len(response.data or [])

    def delete_where(self, table: str, filters: dict[str, Any]) -> int:
        query = self.client.table(table).delete()
        for column, value in filters.items():
            query = query.eq(column, _jsonable(value))
        try:
            response = query.execute()
        except Exception as e:
            raise self._fail(table, "delete", e)
        return len(response.data or [])

    def delete_account(self, user_id: UUID | str) -> None:
        # auth.users deletion cascades to songs and prompter_settings
        try:
            self.client.auth.admin.delete_user(str(user_id))
        except Exception as e:
            raise self._fail("auth.users", "delete", e)
        logger.info(f"Deleted account {user_id}")

    def ping(self) -> None:
        try:
            self.client.table("songs").select("id").limit(1).execute()
        except Exception as e:
            raise self._fail("songs", "ping", e)
