# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - csv_codec.py: Song CSV parser and serializer
# - supabase_client.py: Shared Supabase client
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.csv_codec import parse_csv, parse_songs, serialize_songs, strip_legacy_quotes
from lib.supabase_client import SupabaseClient

__all__ = [
    # CSV
    "parse_csv",
    "parse_songs",
    "serialize_songs",
    "strip_legacy_quotes",
    # Supabase
    "SupabaseClient",
]
