# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - content.py: Content items, sectors, sort policies, reorder payloads
# - schedule.py: Lecture rules and resolved schedule views
# - config.py: Global portal configuration document
# - admin.py: Admin accounts, login, visitor heartbeats
# - notification.py: Web push subscriptions and payloads
#
# These models define the "contract" between API and clients.
# =============================================================================

from .content import (
    DEFAULT_SECTORS,
    ContentItem,
    ItemType,
    OrderUpdate,
    ReorderRequest,
    Sector,
    SectorReorderRequest,
    SortPolicy,
)
from .schedule import (
    WEEKDAYS,
    Batch,
    LectureRule,
    Recurrence,
    TodaySchedule,
    WeekSchedule,
)
from .config import GlobalConfig
from .admin import (
    AdminPermissions,
    AdminUserCreate,
    AdminUserDelete,
    LoginRequest,
    LoginResponse,
    PasswordChange,
    VisitorHeartbeat,
)
from .notification import PushPayload, PushSubscription, SubscriptionKeys

__all__ = [
    # Content
    "DEFAULT_SECTORS",
    "ContentItem",
    "ItemType",
    "OrderUpdate",
    "ReorderRequest",
    "Sector",
    "SectorReorderRequest",
    "SortPolicy",
    # Schedule
    "WEEKDAYS",
    "Batch",
    "LectureRule",
    "Recurrence",
    "TodaySchedule",
    "WeekSchedule",
    # Config
    "GlobalConfig",
    # Admin
    "AdminPermissions",
    "AdminUserCreate",
    "AdminUserDelete",
    "LoginRequest",
    "LoginResponse",
    "PasswordChange",
    "VisitorHeartbeat",
    # Notifications
    "PushPayload",
    "PushSubscription",
    "SubscriptionKeys",
]
