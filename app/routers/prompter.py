# =============================================================================
# app/routers/prompter.py - Prompter Settings Endpoints
# =============================================================================
# Read and change the user's prompter configuration. The settings row is
# created with defaults the first time it is read.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import SettingsRepoDep
from core.models.prompter import PrompterSettings, PrompterSettingsUpdate

router = APIRouter()


@router.get("", response_model=PrompterSettings)
async def get_prompter_settings(repo: SettingsRepoDep):
    """Current settings (defaults on first call)."""
    return repo.get_or_create_settings()


@router.patch("", response_model=PrompterSettings)
async def update_prompter_settings(request: PrompterSettingsUpdate, repo: SettingsRepoDep):
    """Change some settings; fields that are not sent keep their value."""
    return repo.update_settings(request)
