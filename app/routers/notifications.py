# =============================================================================
# app/routers/notifications.py - Web Push Subscription Endpoints
# =============================================================================

from fastapi import APIRouter, status

from core.models.notification import PushSubscription
from core.services.notification_service import NotificationService

router = APIRouter()


@router.get("/vapid-key")
async def get_vapid_key():
    """Public VAPID key the browser needs to subscribe."""
    return {"publicKey": NotificationService.vapid_public_key()}


@router.post("/subscribe", status_code=status.HTTP_201_CREATED)
async def subscribe(subscription: PushSubscription):
    """Store a browser push subscription. Repeated subscriptions are ignored."""
    created = NotificationService.save_subscription(subscription)
    return {"success": True, "created": created}
