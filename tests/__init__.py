# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Chants API:
# - test_models.py: Pydantic model validation
# - test_csv_codec.py: CSV parsing and serialization
# - test_schema.py: Table constraints and the row ownership policy
# - test_storage.py / test_repositories.py: Persistence
# - test_transfer_service.py: CSV import/export
# - test_auth.py / test_api.py: Authentication and HTTP endpoints
#
# Run tests with: pytest
# =============================================================================
