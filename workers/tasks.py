# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks that shouldn't block an API request.
#
# Tasks:
# - send_push_broadcast: Deliver a web push message to every subscriber
# =============================================================================

import json
import logging
from typing import Any

from celery import shared_task, current_task
from pywebpush import WebPushException, webpush

from app.config import settings
from core.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# Push services answer 404/410 for subscriptions that no longer exist
GONE_STATUS_CODES = (404, 410)


def update_progress(current: int, total: int, message: str = "Processing..."):
    """
    Update task progress for polling.

    Args:
        current: Current step number
        total: Total steps
        message: Status message
    """
    if current_task and total:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "current": current,
                "total": total,
                "percent": int((current / total) * 100),
                "message": message,
            }
        )


def deliver(subscription: dict[str, Any], payload: dict[str, Any]) -> str:
    """
    Send one push message.

    Returns:
        "sent", "gone" (subscription expired and was removed) or "failed"
    """
    try:
        webpush(
            subscription_info=subscription,
            data=json.dumps(payload),
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            vapid_claims={"sub": settings.VAPID_CLAIMS_EMAIL},
        )
        return "sent"
    except WebPushException as e:
        status_code = e.response.status_code if e.response is not None else None
        if status_code in GONE_STATUS_CODES:
            endpoint = subscription.get("endpoint")
            if endpoint:
                NotificationService.delete_subscription(endpoint)
            return "gone"
        logger.error(f"Push error ({status_code}): {e}")
        return "failed"


# =============================================================================
# Push Broadcast Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.send_push_broadcast")
def send_push_broadcast(self, payload: dict[str, Any]) -> dict[str, int]:
    """
    Deliver a notification to every stored subscription.

    Args:
        payload: Serialized PushPayload (title, body, icon, data)

    Returns:
        Dict with counts:
        - total: subscriptions attempted
        - sent: delivered
        - removed: expired subscriptions deleted
        - failed: other delivery errors
    """
    subscriptions = NotificationService.list_subscriptions()
    total = len(subscriptions)
    logger.info(f"Sending notification to {total} subscribers...")

    counts = {"total": total, "sent": 0, "removed": 0, "failed": 0}
    for index, subscription in enumerate(subscriptions, start=1):
        outcome = deliver(subscription, payload)
        if outcome == "sent":
            counts["sent"] += 1
        elif outcome == "gone":
            counts["removed"] += 1
        else:
            counts["failed"] += 1
        update_progress(index, total, f"Delivered {index}/{total}")

    logger.info(f"Push broadcast finished: {counts}")
    return counts
