# =============================================================================
# core/services/notification_service.py - Web Push Subscriptions
# =============================================================================
# Stores browser push subscriptions and hands broadcasts to the Celery
# worker (workers.tasks.send_push_broadcast), which does the delivery.
# =============================================================================

import logging
from typing import Any

from app.config import settings
from core.models.notification import PushPayload, PushSubscription
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class NotificationService:
    """Service for the push_subscriptions table and broadcast dispatch."""

    @staticmethod
    def vapid_public_key() -> str:
        return settings.VAPID_PUBLIC_KEY

    @staticmethod
    def save_subscription(subscription: PushSubscription) -> bool:
        """
        Store a browser subscription.

        Returns:
            False if the subscription was already stored
        """
        client = SupabaseClient.get_client()
        row = {"subscription": subscription.model_dump(by_alias=True, exclude_none=True)}

        try:
            client.table("push_subscriptions").insert(row).execute()
        except Exception as e:
            if UNIQUE_VIOLATION in str(e):
                return False
            logger.error(f"Failed to save push subscription: {e}")
            raise

        logger.info("Stored push subscription")
        return True

    @staticmethod
    def list_subscriptions() -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = client.table("push_subscriptions").select("subscription").execute()
        return [row["subscription"] for row in response.data or [] if row.get("subscription")]

    @staticmethod
    def delete_subscription(endpoint: str) -> None:
        """Forget a subscription the push service reported as gone."""
        client = SupabaseClient.get_client()
        client.table("push_subscriptions").delete().eq("subscription->>endpoint", endpoint).execute()
        logger.info(f"Removed expired push subscription {endpoint[:40]}...")

    @staticmethod
    def enqueue_broadcast(payload: PushPayload) -> str | None:
        """
        Queue a push broadcast to every subscriber.

        Broadcasting is fire-and-forget for the caller: a broker outage is
        logged and the triggering request still succeeds.

        Returns:
            Celery task id, or None if nothing was queued
        """
        if not settings.push_enabled:
            logger.debug("Push disabled (VAPID keys not configured); skipping broadcast")
            return None

        try:
            from workers.tasks import send_push_broadcast

            result = send_push_broadcast.delay(payload.model_dump())
            logger.info(f"Queued push broadcast '{payload.title}' as task {result.id}")
            return result.id
        except Exception as e:
            logger.warning(f"Failed to queue push broadcast: {e}")
            return None
