# =============================================================================
# core/storage/ - Table Store Backends
# =============================================================================
# - base.py: TableStore interface
# - supabase.py: Supabase/PostgREST backend (production)
# - memory.py: In-process backend with the same constraints (dev, tests)
# =============================================================================

from .base import TableStore
from .memory import InMemoryTableStore
from .supabase import SupabaseTableStore

__all__ = [
    "TableStore",
    "InMemoryTableStore",
    "SupabaseTableStore",
]
