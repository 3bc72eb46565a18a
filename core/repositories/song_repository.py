# =============================================================================
# core/repositories/song_repository.py - Song Persistence
# =============================================================================
# CRUD for one owner's songs. All access goes through OwnedTable, so
# foreign rows are denied and new rows are always stamped with the owner.
# =============================================================================

import logging
import unicodedata
from uuid import UUID

from app.exceptions import SongNotFoundError
from core.models.song import Song, SongCategory, SongCreate, SongRecord, SongUpdate
from core.repositories.guard import OwnedTable
from core.schema import SONGS
from core.storage.base import TableStore

logger = logging.getLogger(__name__)


def title_sort_key(title: str) -> tuple[str, str]:
    """
    Order titles alphabetically ignoring case and accents ("Água" sorts
    with "agua", before "Angola").
    """
    decomposed = unicodedata.normalize("NFKD", title)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), title


class SongRepository:
    """
    Songs of a single account.

    Example:
        repo = SongRepository(store, owner=user.id)
        song = repo.create_song(SongCreate(title="Paranauê", category="angola"))
        repo.delete_song(song.id)
    """

    def __init__(self, store: TableStore, owner: UUID | str | None):
        self.table = OwnedTable(store, SONGS, owner, SongNotFoundError)

    @property
    def owner(self) -> str | None:
        return self.table.owner

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_songs(self, category: SongCategory | None = None) -> list[Song]:
        """All songs of the owner, oldest first, optionally for one category."""
        filters = {"category": category.value} if category else {}
        rows = self.table.select(order_by="created_at", **filters)
        return [Song.model_validate(row) for row in rows]

    def list_songs_by_category(self) -> dict[SongCategory, list[Song]]:
        """
        Songs grouped the way the dashboard shows them.

        Every category is present; songs within one are sorted by title.
        """
        grouped: dict[SongCategory, list[Song]] = {category: [] for category in SongCategory}
        for song in self.list_songs():
            grouped[song.category].append(song)
        for songs in grouped.values():
            songs.sort(key=lambda song: title_sort_key(song.title))
        return grouped

    def get_song(self, song_id: UUID | str) -> Song:
        return Song.model_validate(self.table.get(song_id))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_song(self, song: SongCreate) -> Song:
        row = song.model_dump(mode="json")
        created = self.table.insert([row])[0]
        logger.info(f"Created song {created['id']} for user {self.owner}")
        return Song.model_validate(created)

    def create_songs(self, records: list[SongRecord]) -> list[Song]:
        """
        Insert many songs in one statement.

        Callers validate every record first; the store writes all of them
        or none.
        """
        if not records:
            return []
        created = self.table.insert([record.to_row() for record in records])
        logger.info(f"Created {len(created)} songs for user {self.owner}")
        return [Song.model_validate(row) for row in created]

    def update_song(self, song_id: UUID | str, changes: SongUpdate) -> Song:
        fields = changes.model_dump(mode="json", exclude_unset=True)
        # Required columns can be left alone but never cleared
        for column in ("title", "category"):
            if column in fields and fields[column] is None:
                del fields[column]
        updated = self.table.update(song_id, fields)
        logger.info(f"Updated song {song_id}")
        return Song.model_validate(updated)

    def delete_song(self, song_id: UUID | str) -> None:
        self.table.delete([song_id])
        logger.info(f"Deleted song {song_id}")

    def delete_songs(self, song_ids: list[UUID | str]) -> int:
        """Delete a selection of songs; all ids must exist and be owned."""
        count = self.table.delete(list(dict.fromkeys(str(song_id) for song_id in song_ids)))
        logger.info(f"Deleted {count} selected song(s) for user {self.owner}")
        return count

    def delete_all_songs(self) -> int:
        return self.table.delete_all()
