# =============================================================================
# app/routers/visitors.py - Visitor Analytics Heartbeat
# =============================================================================

import logging

from fastapi import APIRouter, HTTPException, status

from core.models.admin import VisitorHeartbeat
from core.services.audit_service import VisitorService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/heartbeat")
async def heartbeat(body: VisitorHeartbeat):
    """Record time spent on the portal by an anonymous visitor."""
    if not body.visitor_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="visitorId is required",
        )

    VisitorService.record_heartbeat(body)
    return {"success": True}
