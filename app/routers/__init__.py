# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - songs.py: Song CRUD and bulk deletion
# - transfer.py: CSV import and export
# - prompter.py: Prompter settings
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import prompter
from . import songs
from . import transfer

__all__ = [
    "health",
    "prompter",
    "songs",
    "transfer",
]
