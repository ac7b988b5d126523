# =============================================================================
# core/services/audit_service.py - Admin Audit Trail & Visitor Analytics
# =============================================================================
# Audit entries record who changed what from the admin panel.
# Visitor logs aggregate anonymous time-on-site per browser.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from core.models.admin import VisitorHeartbeat
from lib.supabase_client import SupabaseClient
from lib.utils import sanitize_text

logger = logging.getLogger(__name__)

AUDIT_DETAILS_MAX = 500
DISPLAY_NAME_MAX = 50
AUDIT_PAGE_SIZE = 200
VISITOR_PAGE_SIZE = 100


class AuditService:
    """Service for the audit_logs table."""

    @staticmethod
    def log_action(
        username: str,
        action: str,
        details: str,
        ip: str | None = None,
    ) -> None:
        """
        Record an admin action.

        Auditing is best-effort: a failed insert is logged and the admin
        operation that triggered it still succeeds.
        """
        client = SupabaseClient.get_client()

        entry = {
            "username": username,
            "action": action,
            "details": sanitize_text(details, max_length=AUDIT_DETAILS_MAX),
            "ip": ip,
        }

        try:
            client.table("audit_logs").insert(entry).execute()
            logger.debug(f"Audit: {username} {action}")
        except Exception as e:
            logger.warning(f"Failed to write audit entry {action} for {username}: {e}")

    @staticmethod
    def list_logs(limit: int = AUDIT_PAGE_SIZE) -> list[dict[str, Any]]:
        """Most recent audit entries first."""
        client = SupabaseClient.get_client()
        response = (
            client.table("audit_logs")
            .select("*")
            .order("timestamp", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []


class VisitorService:
    """Service for the visitor_logs table."""

    @staticmethod
    def record_heartbeat(heartbeat: VisitorHeartbeat) -> dict[str, Any]:
        """
        Upsert a visitor's running totals, keyed on visitor_id.

        Raises:
            ValueError: If the heartbeat has no visitor id
        """
        if not heartbeat.visitor_id:
            raise ValueError("visitorId is required")

        client = SupabaseClient.get_client()

        row = {
            "visitor_id": sanitize_text(heartbeat.visitor_id),
            "display_name": sanitize_text(heartbeat.display_name or "Guest", max_length=DISPLAY_NAME_MAX),
            "total_time_spent": int(heartbeat.time_spent or 0),
            "visit_count": heartbeat.visit_count or 1,
            "last_active": datetime.now(timezone.utc).isoformat(),
        }

        try:
            client.table("visitor_logs").upsert(row, on_conflict="visitor_id").execute()
        except Exception as e:
            logger.error(f"Failed to record visitor heartbeat: {e}")
            raise

        return row

    @staticmethod
    def list_visitors(limit: int = VISITOR_PAGE_SIZE) -> list[dict[str, Any]]:
        """Most recently active visitors first."""
        client = SupabaseClient.get_client()
        response = (
            client.table("visitor_logs")
            .select("*")
            .order("last_active", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []
