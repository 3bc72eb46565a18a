# =============================================================================
# core/models/song.py - Song Schemas
# =============================================================================
# These models define the API contract for song operations:
# - SongCategory: The three capoeira song styles
# - SongCreate / SongUpdate: Input for creating and editing a song
# - Song: A stored song row as returned to clients
# - SongRecord: A song read from a CSV import (canonical fields + extras)
#
# Songs are always owned by exactly one account (user_id).
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class SongCategory(str, Enum):
    """
    Song categories, grouped by the rhythm played on the berimbau.

    The values are stored verbatim in the `songs.category` column and
    must match its check constraint.
    """
    ANGOLA = "angola"
    SAO_BENTO_PEQUENO = "saoBentoPequeno"
    SAO_BENTO_GRANDE = "saoBentoGrande"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class SongCreate(BaseModel):
    """
    Schema for creating a new song from the editor.

    Example:
        {
            "title": "Paranauê",
            "category": "angola",
            "mnemonic": "Para-na-uê",
            "lyrics": "Paranauê, paranauê paraná\\n...",
            "media_link": "https://youtu.be/..."
        }
    """

    title: str = Field(
        ...,
        min_length=1,
        description="Song title"
    )

    category: SongCategory = Field(
        ...,
        description="One of angola, saoBentoPequeno, saoBentoGrande"
    )

    # Short phrase shown by the prompter instead of the full lyrics
    mnemonic: str | None = Field(
        default=None,
        description="Mnemonic phrase for the prompter"
    )

    lyrics: str | None = Field(
        default=None,
        description="Full lyrics (multi-line)"
    )

    # Not validated as a URL
    media_link: str | None = Field(
        default=None,
        description="Link to an audio or video recording"
    )


class SongUpdate(BaseModel):
    """
    Schema for editing a song.

    Only the fields that are sent are changed. Ownership and timestamps
    cannot be set by clients.
    """

    title: str | None = Field(default=None, min_length=1)
    category: SongCategory | None = None
    mnemonic: str | None = None
    lyrics: str | None = None
    media_link: str | None = None


class Song(BaseModel):
    """
    A stored song as returned by the repository and the API.
    """

    id: UUID
    user_id: UUID
    title: str
    category: SongCategory
    mnemonic: str | None = None
    lyrics: str | None = None
    media_link: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        """Pydantic configuration for this model."""
        # Rows come back from storage as plain dicts
        from_attributes = True


class SongRecord(BaseModel):
    """
    A song read from an imported CSV file.

    Holds the five canonical columns. Any other column present in the
    file is kept in `extra` under its lowercased header name; extras are
    reported back to the caller but never persisted.
    """

    title: str = ""
    category: SongCategory
    mnemonic: str | None = None
    lyrics: str | None = None
    media_link: str | None = None
    extra: dict[str, str] = Field(default_factory=dict)

    def to_row(self) -> dict:
        """Columns to insert into the songs table (owner is added by the repository)."""
        return {
            "title": self.title,
            "category": self.category.value,
            "mnemonic": self.mnemonic,
            "lyrics": self.lyrics,
            "media_link": self.media_link,
        }


class SongList(BaseModel):
    """Schema for listing songs."""

    songs: list[Song] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)


class ImportResult(BaseModel):
    """
    Outcome of a successful CSV import.

    Example:
        {
            "imported": 3,
            "songs": [...],
            "ignored_columns": ["notes"]
        }
    """

    imported: int = Field(default=0, ge=0)
    songs: list[Song] = Field(default_factory=list)

    # Extra CSV columns that were read but not stored
    ignored_columns: list[str] = Field(default_factory=list)
