# =============================================================================
# app/routers/admin.py - Content Management Endpoints
# =============================================================================
# Item CRUD, manual ordering, portal/sector settings, and file uploads.
# Every route needs an admin session; writes also need the CSRF header.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, File, HTTPException, Path, Request, UploadFile, status
from pydantic import ValidationError

from app.auth import AdminSession, require_permission
from app.config import settings
from app.exceptions import FileTooLargeError
from core.models.content import ReorderRequest, Sector, SectorReorderRequest
from core.services.audit_service import AuditService
from core.services.config_service import ConfigService
from core.services.item_service import ItemService
from core.services.storage_service import StorageService
from lib.utils import client_ip

logger = logging.getLogger(__name__)

router = APIRouter()

Editor = Annotated[AdminSession, Depends(require_permission("canEdit"))]
Deleter = Annotated[AdminSession, Depends(require_permission("canDelete"))]


# =============================================================================
# Items
# =============================================================================

@router.post("/items")
async def create_item(
    request: Request,
    admin: Editor,
    payload: Annotated[dict[str, Any], Body()],
):
    """
    Publish a new item.

    The item is placed at order_index 0 and subscribers get a push
    notification in the background.
    """
    item = ItemService.create_item(payload, admin.username, client_ip(request))
    return {"success": True, "item": item}


@router.put("/items/{item_id}")
async def update_item(
    admin: Editor,
    item_id: Annotated[str, Path(description="Item ID")],
    payload: Annotated[dict[str, Any], Body()],
):
    item = ItemService.update_item(item_id, payload)
    return {"success": True, "item": item}


@router.delete("/items/{item_id}")
async def delete_item(
    request: Request,
    admin: Deleter,
    item_id: Annotated[str, Path(description="Item ID")],
):
    ItemService.delete_item(item_id)
    AuditService.log_action(admin.username, "DELETE_ITEM", f"Deleted item {item_id}", client_ip(request))
    return {"success": True}


# =============================================================================
# Ordering
# =============================================================================

@router.post("/reorder")
async def commit_reorder(admin: Editor, body: ReorderRequest):
    """
    Persist positions computed by the admin UI.

    Only order_index is written. A failed commit returns an error; the
    caller should reload rather than trust its local order.
    """
    updated = ItemService.commit_order(body.updates)
    return {"success": True, "updated": updated}


@router.post("/sectors/{sector_id}/reorder")
async def reorder_sector(
    admin: Editor,
    sector_id: Annotated[str, Path(description="Sector ID")],
    body: SectorReorderRequest,
):
    """
    Move one item onto another's position and persist the sector's order.

    Sectors not sorted manually are left untouched (changed is false).
    """
    changed, ordered = ItemService.move_item(sector_id, body.moved_id, body.target_id)
    return {
        "success": True,
        "changed": changed,
        "order": [item.id for item in ordered],
    }


# =============================================================================
# Settings
# =============================================================================

@router.post("/config")
async def save_config(
    request: Request,
    admin: Editor,
    document: Annotated[dict[str, Any], Body()],
):
    """Replace the portal configuration (lecture schedules included)."""
    try:
        ConfigService.save_config(document)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False),
        )
    AuditService.log_action(admin.username, "UPDATE_CONFIG", "Updated portal config", client_ip(request))
    return {"success": True}


@router.post("/sectors")
async def save_sectors(
    request: Request,
    admin: Editor,
    sectors: list[Sector],
):
    ConfigService.save_sectors(sectors)
    AuditService.log_action(admin.username, "UPDATE_SECTORS", f"Saved {len(sectors)} sectors", client_ip(request))
    return {"success": True}


# =============================================================================
# Uploads
# =============================================================================

@router.post("/upload")
async def upload_file(
    admin: Editor,
    file: Annotated[UploadFile, File(description="Attachment to publish")],
):
    """Store an attachment and return its public URL."""
    content = await file.read()
    file_size_bytes = len(content)

    if not file_size_bytes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    if file_size_bytes > settings.max_upload_size_bytes:
        raise FileTooLargeError(file_size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    logger.info(f"{admin.username} uploading {file.filename} ({file_size_bytes} bytes)")
    url = StorageService.upload_file(content, file.filename, file.content_type)
    return {"url": url}
