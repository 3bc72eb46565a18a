# =============================================================================
# lib/supabase_client.py - Shared Supabase Client
# =============================================================================
# One service-role client per process, created on first use.
#
# The service key bypasses Row Level Security, so this client must only be
# reached through core.storage.SupabaseTableStore, whose callers go through
# core.repositories.guard.OwnedTable first.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   client.table("songs").select("*").eq("user_id", user_id).execute()
# =============================================================================

import logging

from supabase import Client, ClientOptions, create_client

from app.config import settings
from app.exceptions import StorageError

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Holder for the process-wide service-role client."""

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the shared client.

        Raises:
            StorageError: If the client cannot be created (bad URL or key)
        """
        if cls._instance is None:
            # A server-side client never signs in, so there is no session to keep
            options = ClientOptions(auto_refresh_token=False, persist_session=False)
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY,
                    options=options,
                )
            except Exception as e:
                logger.error(f"Could not create Supabase client for {settings.SUPABASE_URL}: {e}")
                raise StorageError("connect", f"{e} (check SUPABASE_URL and SUPABASE_SERVICE_KEY)")
            logger.info(f"Supabase client ready for {settings.SUPABASE_URL}")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the cached client so the next call rebuilds it from settings."""
        cls._instance = None
