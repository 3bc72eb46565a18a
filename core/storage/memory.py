# =============================================================================
# core/storage/memory.py - In-Process Table Store
# =============================================================================
# Dict-backed implementation of TableStore that behaves like the Supabase
# schema: generated ids, column defaults, NOT NULL and CHECK constraints,
# primary-key uniqueness, a foreign key to the account registry and
# cascading deletion when an account is removed.
#
# Used by STORAGE_BACKEND=memory and by the test suite.
# =============================================================================

import copy
import logging
import threading
from typing import Any
from uuid import UUID, uuid4

from app.exceptions import ConstraintViolationError
from core.schema import TABLES, TableSchema, apply_defaults, check_row
from core.storage.base import TableStore

logger = logging.getLogger(__name__)


def _key(value: Any) -> str:
    return str(value)


def _matches(row: dict[str, Any], filters: dict[str, Any]) -> bool:
    return all(_key(row.get(column)) == _key(value) for column, value in filters.items())


class InMemoryTableStore(TableStore):
    """
    Thread-safe in-memory tables.

    Accounts must be registered before they can own rows, mirroring the
    foreign key to auth.users.

    Example:
        store = InMemoryTableStore()
        store.register_account(user_id)
        store.insert_many("songs", [{"user_id": str(user_id), ...}])
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._accounts: set[str] = set()
        self._deleted: set[str] = set()
        self._tables: dict[str, dict[str, dict[str, Any]]] = {name: {} for name in TABLES}

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def register_account(self, user_id: UUID | str) -> None:
        """
        Add an account. Ids removed by delete_account() cannot come back.
        """
        with self._lock:
            if _key(user_id) in self._deleted:
                logger.warning(f"Refusing to re-register deleted account {user_id}")
                return
            self._accounts.add(_key(user_id))

    def has_account(self, user_id: UUID | str) -> bool:
        return _key(user_id) in self._accounts

    def is_deleted(self, user_id: UUID | str) -> bool:
        return _key(user_id) in self._deleted

    def delete_account(self, user_id: UUID | str) -> None:
        owner = _key(user_id)
        with self._lock:
            self._accounts.discard(owner)
            self._deleted.add(owner)
            removed = 0
            for name, schema in TABLES.items():
                rows = self._tables[name]
                for pk in [pk for pk, row in rows.items() if _key(row[schema.owner_column]) == owner]:
                    del rows[pk]
                    removed += 1
        logger.info(f"Deleted account {owner} ({removed} owned rows cascaded)")

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def select(
        self,
        table: str,
        filters: dict[str, Any],
        order_by: str | None = None,
    ) -> list[dict[str, Any]]:
        with self._lock:
            rows = [copy.deepcopy(row) for row in self._table(table).values() if _matches(row, filters)]
        if order_by:
            rows.sort(key=lambda row: (row.get(order_by) is None, row.get(order_by)))
        return rows

    def get(self, table: str, key_column: str, key: Any) -> dict[str, Any] | None:
        with self._lock:
            for row in self._table(table).values():
                if _key(row.get(key_column)) == _key(key):
                    return copy.deepcopy(row)
        return None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert_many(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        schema = TABLES[table]
        with self._lock:
            prepared = [self._prepare_insert(schema, row) for row in rows]

            # Validate the whole batch before touching the table
            keys = [_key(row[schema.primary_key]) for row in prepared]
            if len(set(keys)) != len(keys) or any(k in self._tables[table] for k in keys):
                raise ConstraintViolationError(
                    table, f"{table}_pkey", f"Duplicate key value violates {table}_pkey"
                )

            for key, row in zip(keys, prepared):
                self._tables[table][key] = row

        logger.debug(f"Inserted {len(prepared)} row(s) into {table}")
        return [copy.deepcopy(row) for row in prepared]

    def update(
        self,
        table: str,
        key_column: str,
        key: Any,
        fields: dict[str, Any],
    ) -> dict[str, Any] | None:
        schema = TABLES[table]
        with self._lock:
            rows = self._table(table)
            pk = _key(key) if key_column == schema.primary_key else next(
                (k for k, row in rows.items() if _key(row.get(key_column)) == _key(key)), None
            )
            if pk is None or pk not in rows:
                return None

            updated = {**rows[pk], **fields}
            check_row(schema, updated)
            self._check_owner(schema, updated)
            if _key(updated[schema.primary_key]) != pk:
                raise ConstraintViolationError(
                    table, f"{table}_pkey", f"Primary key of {table} cannot be changed"
                )
            rows[pk] = updated
            return copy.deepcopy(updated)

    def delete(self, table: str, key_column: str, keys: list[Any]) -> int:
        wanted = {_key(k) for k in keys}
        with self._lock:
            rows = self._table(table)
            doomed = [pk for pk, row in rows.items() if _key(row.get(key_column)) in wanted]
            for pk in doomed:
                del rows[pk]
        return len(doomed)

    def delete_where(self, table: str, filters: dict[str, Any]) -> int:
        with self._lock:
            rows = self._table(table)
            doomed = [pk for pk, row in rows.items() if _matches(row, filters)]
            for pk in doomed:
                del rows[pk]
        return len(doomed)

    def ping(self) -> None:
        return None

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _table(self, table: str) -> dict[str, dict[str, Any]]:
        try:
            return self._tables[table]
        except KeyError:
            raise ConstraintViolationError(table, "relation", f'Relation "{table}" does not exist')

    def _prepare_insert(self, schema: TableSchema, row: dict[str, Any]) -> dict[str, Any]:
        prepared = apply_defaults(schema, row)
        if schema.generated_key and prepared.get(schema.primary_key) is None:
            prepared[schema.primary_key] = str(uuid4())
        for column in schema.columns:
            prepared.setdefault(column, None)
        if prepared[schema.owner_column] is not None:
            prepared[schema.owner_column] = _key(prepared[schema.owner_column])
        check_row(schema, prepared)
        self._check_owner(schema, prepared)
        return prepared

    def _check_owner(self, schema: TableSchema, row: dict[str, Any]) -> None:
        if _key(row[schema.owner_column]) not in self._accounts:
            raise ConstraintViolationError(
                schema.name,
                f"{schema.name}_{schema.owner_column}_fkey",
                f"Account {row[schema.owner_column]} does not exist",
            )
