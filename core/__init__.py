# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for songs and prompter settings
# - schema.py: Table definitions, constraints and ownership policy
# - storage/: Supabase and in-memory table stores
# - repositories/: Owner-scoped song and settings persistence
# - services/: CSV import/export
#
# Code in this package should NOT import from FastAPI routers.
# This keeps the logic testable and reusable.
# =============================================================================
