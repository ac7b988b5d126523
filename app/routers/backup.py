# =============================================================================
# app/routers/backup.py - Backup Export / Restore
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from app.auth import AdminSession, require_permission
from core.services.audit_service import AuditService
from core.services.backup_service import BackupService
from lib.utils import client_ip

logger = logging.getLogger(__name__)

router = APIRouter()

Editor = Annotated[AdminSession, Depends(require_permission("canEdit"))]


@router.get("/export")
async def export_backup(admin: Editor):
    """Full dump of items, config, visitor logs and the drive registry."""
    return BackupService.export_backup()


@router.post("/import")
async def import_backup(
    request: Request,
    admin: Editor,
    backup: Annotated[dict[str, Any], Body()],
):
    """Restore a document produced by /export."""
    data = backup.get("data")
    if not isinstance(data, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Backup has no data section",
        )

    restored = BackupService.import_backup(data)
    AuditService.log_action(admin.username, "IMPORT", "Restored full backup", client_ip(request))
    return {"success": True, "restored": restored}
