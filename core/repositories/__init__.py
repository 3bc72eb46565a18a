# =============================================================================
# core/repositories/ - Owner-Scoped Persistence
# =============================================================================

from .guard import OwnedTable
from .settings_repository import SettingsRepository
from .song_repository import SongRepository

__all__ = [
    "OwnedTable",
    "SettingsRepository",
    "SongRepository",
]
