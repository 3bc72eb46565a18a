# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.auth import AuthUser, get_current_user
from app.config import settings
from core.repositories import SettingsRepository, SongRepository
from core.storage import InMemoryTableStore, SupabaseTableStore, TableStore


@lru_cache
def get_table_store() -> TableStore:
    """
    Get the configured storage backend.

    One instance per process; the in-memory store would lose its rows
    otherwise.
    """
    if settings.STORAGE_BACKEND == "memory":
        return InMemoryTableStore()
    return SupabaseTableStore()


StoreDep = Annotated[TableStore, Depends(get_table_store)]
UserDep = Annotated[AuthUser, Depends(get_current_user)]


def _ensure_account(store: TableStore, user: AuthUser) -> None:
    # Supabase already has the user in auth.users; the memory store needs telling.
    # A deleted account keeps its valid token until expiry but owns nothing again.
    if (
        isinstance(store, InMemoryTableStore)
        and not store.has_account(user.id)
        and not store.is_deleted(user.id)
    ):
        store.register_account(user.id)


def get_song_repository(store: StoreDep, user: UserDep) -> SongRepository:
    """Song repository bound to the authenticated user."""
    _ensure_account(store, user)
    return SongRepository(store, owner=user.id)


def get_settings_repository(store: StoreDep, user: UserDep) -> SettingsRepository:
    """Prompter settings repository bound to the authenticated user."""
    _ensure_account(store, user)
    return SettingsRepository(store, owner=user.id)


# Type aliases for dependency injection
SongRepoDep = Annotated[SongRepository, Depends(get_song_repository)]
SettingsRepoDep = Annotated[SettingsRepository, Depends(get_settings_repository)]
