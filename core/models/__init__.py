# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - song.py: Song CRUD schemas and CSV import records
# - prompter.py: Prompter settings schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .song import (
    ImportResult,
    Song,
    SongCategory,
    SongCreate,
    SongList,
    SongRecord,
    SongUpdate,
)

from .prompter import (
    DEFAULT_ROTATION_INTERVAL,
    FontSize,
    PrompterSettings,
    PrompterSettingsUpdate,
)

__all__ = [
    # Song
    "ImportResult",
    "Song",
    "SongCategory",
    "SongCreate",
    "SongList",
    "SongRecord",
    "SongUpdate",
    # Prompter
    "DEFAULT_ROTATION_INTERVAL",
    "FontSize",
    "PrompterSettings",
    "PrompterSettingsUpdate",
]
