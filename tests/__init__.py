# =============================================================================
# tests/ - Test Suite
# =============================================================================
# Route and service tests run against an in-memory stand-in for Supabase
# (see conftest.py), so no network or database is needed.
#
# Run tests with: pytest
# =============================================================================
