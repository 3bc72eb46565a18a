# =============================================================================
# core/models/prompter.py - Prompter Settings Schemas
# =============================================================================
# The prompter cycles through songs full-screen. Each account has exactly
# one settings row, created with defaults the first time it is read.
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class FontSize(str, Enum):
    """Prompter text sizes; must match the font_size check constraint."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    XLARGE = "xlarge"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


DEFAULT_ROTATION_INTERVAL = 120


class PrompterSettings(BaseModel):
    """
    Stored prompter configuration for one account.

    Example:
        {
            "user_id": "550e8400-e29b-41d4-a716-446655440000",
            "rotation_interval": 120,
            "font_size": "medium",
            "is_dark_mode": true,
            "use_high_contrast": false,
            "upper_case": false,
            "updated_at": "2025-10-16T17:05:21Z"
        }
    """

    user_id: UUID

    # Seconds before the prompter moves on to the next song
    rotation_interval: int = DEFAULT_ROTATION_INTERVAL
    font_size: FontSize = FontSize.MEDIUM
    is_dark_mode: bool = True
    use_high_contrast: bool = False
    upper_case: bool = False
    updated_at: datetime | None = None


class PrompterSettingsUpdate(BaseModel):
    """Partial update of the prompter settings; unset fields are left alone."""

    rotation_interval: int | None = Field(
        default=None,
        ge=1,
        description="Seconds between song rotations (at least 1)"
    )
    font_size: FontSize | None = None
    is_dark_mode: bool | None = None
    use_high_contrast: bool | None = None
    upper_case: bool | None = None
