# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides sample items, sectors, and lecture rules
# - Provides a mocked Supabase client and a stand-in session denylist
# =============================================================================

import os
from unittest.mock import MagicMock, patch

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-session-tokens")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("VAPID_PUBLIC_KEY", "")
os.environ.setdefault("VAPID_PRIVATE_KEY", "")

import pytest

from core.models.admin import AdminPermissions
from core.models.content import ContentItem


# =============================================================================
# Helpers
# =============================================================================

def make_item(item_id: str, **fields) -> ContentItem:
    """Build a ContentItem with sensible defaults for ordering tests."""
    data = {
        "id": item_id,
        "title": fields.pop("title", item_id),
        "date": fields.pop("date", "2024.01.01"),
        "sector": fields.pop("sector", "announcements"),
    }
    data.update(fields)
    return ContentItem.model_validate(data)


def supabase_response(data):
    """Mimic the object returned by postgrest's execute()."""
    response = MagicMock()
    response.data = data
    return response


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sample_items():
    """Items of one sector covering pinned, dated, and numbered titles."""
    return [
        make_item("a", title="Lecture 10", date="2024.03.01", order_index=2),
        make_item("b", title="Lecture 2", date="2024.03.05", order_index=0),
        make_item("c", title="Exam notice", date="2024.02.20", isPinned=True, order_index=3),
        make_item("d", title="lecture 1", date="2024-03-03", order_index=1),
        make_item("e", title="Broken date", date="someday", order_index=4),
    ]


@pytest.fixture
def sample_rules():
    """Lecture rules as stored in the portal config."""
    return [
        {
            "id": "os",
            "subject": "Operating Systems",
            "batch": "AICS",
            "days": ["Monday", "Wednesday"],
            "startTime": "10:00",
            "endTime": "11:30",
            "link": "https://meet.example.com/os",
        },
        {
            "id": "ml",
            "subject": "Machine Learning",
            "batch": "CSDA",
            "days": ["Monday"],
            "startTime": "09:00",
            "endTime": "10:00",
        },
        {
            "id": "seminar",
            "subject": "Seminar",
            "days": ["Monday"],
            "startTime": "08:00",
        },
        {
            "id": "legacy",
            "subject": "Databases",
            "batch": "AICS",
            "dayOfWeek": "Friday",
            "startTime": "14:00",
        },
        {
            "id": "off",
            "subject": "Cancelled",
            "batch": "AICS",
            "days": ["Monday"],
            "startTime": "07:00",
            "isActive": False,
        },
    ]


@pytest.fixture
def mock_client():
    """Patch the Supabase singleton with a MagicMock client."""
    client = MagicMock()
    with patch("lib.supabase_client.SupabaseClient.get_client", return_value=client):
        yield client


@pytest.fixture
def root_permissions():
    return AdminPermissions.root()


@pytest.fixture
def editor_permissions():
    return AdminPermissions(canEdit=True)


@pytest.fixture(autouse=True)
def session_denylist():
    """Stand-in Redis for session revocation; nothing is revoked unless a test says so."""
    redis_client = MagicMock()
    redis_client.exists.return_value = 0
    with patch("app.auth.security.get_redis_client", return_value=redis_client):
        yield redis_client
