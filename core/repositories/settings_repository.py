# =============================================================================
# core/repositories/settings_repository.py - Prompter Settings Persistence
# =============================================================================
# One row per account, created with defaults on first access.
# =============================================================================

import logging
from uuid import UUID

from app.exceptions import SettingsNotFoundError
from core.models.prompter import PrompterSettings, PrompterSettingsUpdate
from core.repositories.guard import OwnedTable
from core.schema import PROMPTER_SETTINGS
from core.storage.base import TableStore

logger = logging.getLogger(__name__)


class SettingsRepository:
    """Prompter settings of a single account."""

    def __init__(self, store: TableStore, owner: UUID | str | None):
        self.table = OwnedTable(store, PROMPTER_SETTINGS, owner, SettingsNotFoundError)

    def get_or_create_settings(self) -> PrompterSettings:
        """
        Return the owner's settings, inserting the defaults if none exist yet.
        """
        row = self.table.find(self.table.owner)
        if row is None:
            row = self.table.insert([{}])[0]
            logger.info(f"Created default prompter settings for user {self.table.owner}")
        return PrompterSettings.model_validate(row)

    def update_settings(self, changes: PrompterSettingsUpdate) -> PrompterSettings:
        self.get_or_create_settings()
        fields = changes.model_dump(mode="json", exclude_none=True)
        updated = self.table.update(self.table.owner, fields)
        logger.info(f"Updated prompter settings for user {self.table.owner}: {sorted(fields)}")
        return PrompterSettings.model_validate(updated)
