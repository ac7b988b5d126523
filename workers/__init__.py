# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# work that shouldn't block an API request (web push fan-out).
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (push broadcast)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import send_push_broadcast
#   result = send_push_broadcast.delay(payload)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
