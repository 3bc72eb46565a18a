# =============================================================================
# app/routers/songs.py - Song CRUD Endpoints
# =============================================================================
# Create, read, update and delete the authenticated user's songs.
# Bulk deletions must be confirmed explicitly: once for a selection, twice
# for deleting everything.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel, Field

from app.dependencies import SongRepoDep
from app.exceptions import ConfirmationRequiredError
from core.models.song import Song, SongCategory, SongCreate, SongList, SongUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class DeleteSelectedRequest(BaseModel):
    """Songs to delete in one go."""
    ids: list[UUID] = Field(..., min_length=1, description="IDs of the selected songs")
    confirm: bool = Field(default=False, description="Must be true")


class DeleteResponse(BaseModel):
    deleted: int
    message: str


def _require_confirmation(action: str, **flags: bool) -> None:
    missing = [name for name, value in flags.items() if not value]
    if missing:
        raise ConfirmationRequiredError(action, missing)


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=SongList)
async def list_songs(
    repo: SongRepoDep,
    category: Annotated[SongCategory | None, Query(description="Only songs of this category")] = None,
):
    """List the user's songs, oldest first."""
    songs = repo.list_songs(category=category)
    return SongList(songs=songs, total=len(songs))


@router.get("/by-category", response_model=dict[SongCategory, list[Song]])
async def list_songs_by_category(repo: SongRepoDep):
    """
    Songs grouped by category, as shown on the dashboard.

    Every category is present, possibly with an empty list.
    """
    return repo.list_songs_by_category()


@router.post("", response_model=Song, status_code=201)
async def create_song(request: SongCreate, repo: SongRepoDep):
    """Create a song owned by the current user."""
    return repo.create_song(request)


@router.post("/delete-selected", response_model=DeleteResponse)
async def delete_selected_songs(request: DeleteSelectedRequest, repo: SongRepoDep):
    """
    Delete a selection of songs.

    Nothing is deleted if any ID is unknown or belongs to someone else.
    """
    _require_confirmation(f"delete {len(request.ids)} song(s)", confirm=request.confirm)

    count = repo.delete_songs(request.ids)
    return DeleteResponse(deleted=count, message=f"Deleted {count} song(s)")


@router.delete("", response_model=DeleteResponse)
async def delete_all_songs(
    repo: SongRepoDep,
    confirm: Annotated[bool, Query(description="First confirmation")] = False,
    confirm_irreversible: Annotated[bool, Query(description="Second confirmation: this cannot be undone")] = False,
):
    """
    Delete ALL of the user's songs.

    Irreversible, so two separate confirmations are required.
    """
    _require_confirmation(
        "delete all songs",
        confirm=confirm,
        confirm_irreversible=confirm_irreversible,
    )

    count = repo.delete_all_songs()
    logger.warning(f"User {repo.owner} deleted all of their songs ({count})")
    return DeleteResponse(deleted=count, message=f"Deleted {count} song(s)")


@router.get("/{song_id}", response_model=Song)
async def get_song(
    song_id: Annotated[UUID, Path(description="Song UUID")],
    repo: SongRepoDep,
):
    """Get one song. 403 if it belongs to another user."""
    return repo.get_song(song_id)


@router.patch("/{song_id}", response_model=Song)
async def update_song(
    song_id: Annotated[UUID, Path(description="Song UUID")],
    request: SongUpdate,
    repo: SongRepoDep,
):
    """Edit a song. Only the fields sent are changed."""
    return repo.update_song(song_id, request)


@router.delete("/{song_id}")
async def delete_song(
    song_id: Annotated[UUID, Path(description="Song UUID")],
    repo: SongRepoDep,
):
    """Permanently delete one song."""
    repo.delete_song(song_id)
    return {
        "song_id": str(song_id),
        "message": "Song deleted",
    }
