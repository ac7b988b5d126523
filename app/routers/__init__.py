# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - content.py: Public config, sectors, and item views
# - schedule.py: Today's lectures and the weekly timetable
# - visitors.py: Anonymous visitor heartbeat
# - notifications.py: Web push subscription
# - admin.py: Item management, ordering, settings, uploads
# - users.py: Admin accounts, audit log, visitor analytics
# - backup.py: Full export / restore
# - tasks.py: Background task status endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import content
from . import schedule
from . import visitors
from . import notifications
from . import admin
from . import users
from . import backup
from . import tasks

__all__ = [
    "health",
    "content",
    "schedule",
    "visitors",
    "notifications",
    "admin",
    "users",
    "backup",
    "tasks",
]
