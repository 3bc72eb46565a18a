# =============================================================================
# core/repositories/guard.py - Owner-Scoped Table Access
# =============================================================================
# OwnedTable is the only way repositories reach a TableStore. It binds one
# table to one acting identity and runs core.schema.authorize() on every
# call, so any row it hands back has already been proven to belong to the
# caller. A row owned by someone else is a denial (AuthorizationError),
# never an empty result.
# =============================================================================

import logging
from typing import Any, Callable
from uuid import UUID

from app.exceptions import NotFoundError
from core.schema import Operation, TableSchema, authorize, touch
from core.storage.base import TableStore

logger = logging.getLogger(__name__)


class OwnedTable:
    """
    One table as seen by one owner.

    Args:
        store: Backend holding the rows
        schema: Table description (key, owner column, allowed operations)
        owner: Acting account id; None means unauthenticated
        not_found: Builds the error raised for a missing key
    """

    def __init__(
        self,
        store: TableStore,
        schema: TableSchema,
        owner: UUID | str | None,
        not_found: Callable[[str], NotFoundError],
    ):
        self.store = store
        self.schema = schema
        self.owner = str(owner) if owner is not None else None
        self._not_found = not_found

    @property
    def name(self) -> str:
        return self.schema.name

    def _owned(self, operation: Operation, row: dict[str, Any]) -> dict[str, Any]:
        authorize(self.schema, operation, self.owner, row=row)
        return row

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def select(self, order_by: str | None = None, **filters: Any) -> list[dict[str, Any]]:
        """Rows owned by the actor, optionally narrowed by equality filters."""
        authorize(self.schema, Operation.SELECT, self.owner)
        scoped = {**filters, self.schema.owner_column: self.owner}
        rows = self.store.select(self.name, scoped, order_by=order_by)
        return [self._owned(Operation.SELECT, row) for row in rows]

    def find(self, key: Any) -> dict[str, Any] | None:
        """The row with `key`, None if absent; denied if owned by someone else."""
        authorize(self.schema, Operation.SELECT, self.owner)
        row = self.store.get(self.name, self.schema.primary_key, key)
        if row is None:
            return None
        return self._owned(Operation.SELECT, row)

    def get(self, key: Any) -> dict[str, Any]:
        row = self.find(key)
        if row is None:
            raise self._not_found(str(key))
        return row

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Insert rows as the actor.

        Rows without an owner are assigned to the actor; rows naming
        another owner are rejected before anything is written.
        """
        submitted = []
        for row in rows:
            stamped = dict(row)
            stamped.setdefault(self.schema.owner_column, self.owner)
            authorize(self.schema, Operation.INSERT, self.owner, submitted=stamped)
            submitted.append(stamped)

        inserted = self.store.insert_many(self.name, submitted)
        return [self._owned(Operation.SELECT, row) for row in inserted]

    def update(self, key: Any, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Update one owned row.

        The primary key cannot change and updated_at is always re-stamped.
        """
        existing = self.get(key)
        authorize(self.schema, Operation.UPDATE, self.owner, row=existing, submitted=fields)

        changes = {k: v for k, v in fields.items() if k != self.schema.primary_key}
        changes = touch(changes)

        updated = self.store.update(self.name, self.schema.primary_key, key, changes)
        if updated is None:
            raise self._not_found(str(key))
        return self._owned(Operation.SELECT, updated)

    def delete(self, keys: list[Any]) -> int:
        """
        Delete owned rows by key.

        Every key is checked first; one missing or foreign key aborts the
        whole batch before anything is deleted.
        """
        authorize(self.schema, Operation.DELETE, self.owner)
        for key in keys:
            authorize(self.schema, Operation.DELETE, self.owner, row=self.get(key))
        return self.store.delete(self.name, self.schema.primary_key, list(keys))

    def delete_all(self) -> int:
        """Delete every row owned by the actor."""
        authorize(self.schema, Operation.DELETE, self.owner)
        count = self.store.delete_where(self.name, {self.schema.owner_column: self.owner})
        logger.info(f"Deleted {count} row(s) from {self.name} for {self.owner}")
        return count
