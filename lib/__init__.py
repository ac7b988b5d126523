# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database reads
# - ordering.py: Sector display order, manual reorder and view filters
# - schedule.py: Lecture rule resolution (today / week / virtual posts)
# - utils.py: Sanitization and request helpers
#
# ordering.py and schedule.py are pure and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.ordering import (
    build_order_updates,
    compute_display_order,
    filter_items,
    natural_key,
    parse_item_date,
    reorder,
)
from lib.schedule import (
    build_virtual_lectures,
    parse_rules,
    resolve_today,
    resolve_week,
)
from lib.utils import safe_url, sanitize_html, sanitize_text, strip_client_fields

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Ordering
    "build_order_updates",
    "compute_display_order",
    "filter_items",
    "natural_key",
    "parse_item_date",
    "reorder",
    # Schedule
    "build_virtual_lectures",
    "parse_rules",
    "resolve_today",
    "resolve_week",
    # Utils
    "safe_url",
    "sanitize_html",
    "sanitize_text",
    "strip_client_fields",
]
