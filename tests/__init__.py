# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Core Connect API:
# - test_ordering.py: Sort policies, drag-and-drop reorder, view filters
# - test_schedule.py: Lecture rule resolution (today, week, virtual posts)
# - test_models.py: Unit tests for Pydantic model validation
# - test_item_service.py: Item writes and reorder commits (mocked Supabase)
# - test_auth.py: Password hashing, session tokens, admin accounts
# - test_notifications.py: Push delivery, broadcast task, backups
# - test_routes.py: API endpoints through TestClient
#
# Run tests with: poetry run pytest
# =============================================================================
