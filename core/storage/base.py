# =============================================================================
# core/storage/base.py - Table Store Interface
# =============================================================================
# Minimal row-level interface the repositories talk to. Rows are plain
# dicts keyed by column name, exactly as PostgREST returns them.
#
# A store knows nothing about who is asking: ownership is enforced one
# level up, by core.repositories.guard.OwnedTable.
# =============================================================================

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID


class TableStore(ABC):
    """Backend-agnostic access to the songs and prompter_settings tables."""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: dict[str, Any],
        order_by: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return rows whose columns equal every value in `filters`."""

    @abstractmethod
    def get(self, table: str, key_column: str, key: Any) -> dict[str, Any] | None:
        """Return the row with the given key, or None."""

    @abstractmethod
    def insert_many(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Insert all rows in a single statement.

        Either every row is written or none is.
        """

    @abstractmethod
    def update(
        self,
        table: str,
        key_column: str,
        key: Any,
        fields: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Update one row and return it, or None if it doesn't exist."""

    @abstractmethod
    def delete(self, table: str, key_column: str, keys: list[Any]) -> int:
        """Delete rows by key; returns the number of rows removed."""

    @abstractmethod
    def delete_where(self, table: str, filters: dict[str, Any]) -> int:
        """Delete every row matching `filters`; returns the count."""

    @abstractmethod
    def delete_account(self, user_id: UUID | str) -> None:
        """Remove an account. Owned rows go with it (ON DELETE CASCADE)."""

    @abstractmethod
    def ping(self) -> None:
        """Raise if the backend is unreachable."""
