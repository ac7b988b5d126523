# =============================================================================
# core/models/notification.py - Web Push Schemas
# =============================================================================
# PushSubscription mirrors the browser's PushSubscription.toJSON() shape.
# PushPayload is what the service worker receives and displays.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionKeys(BaseModel):
    p256dh: str
    auth: str


class PushSubscription(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    endpoint: str = Field(..., min_length=1)
    expiration_time: float | None = Field(default=None, alias="expirationTime")
    keys: SubscriptionKeys


class PushPayload(BaseModel):
    title: str
    body: str
    icon: str = "/favicon.ico"
    data: dict = Field(default_factory=dict)
