# =============================================================================
# app/routers/users.py - Admin Accounts, Audit Log & Visitor Analytics
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.auth import AdminSession, require_permission
from core.models.admin import AdminUserCreate, AdminUserDelete
from core.services.admin_service import AdminService
from core.services.audit_service import AuditService, VisitorService
from lib.utils import client_ip

logger = logging.getLogger(__name__)

router = APIRouter()

UserManager = Annotated[AdminSession, Depends(require_permission("canManageUsers"))]
LogViewer = Annotated[AdminSession, Depends(require_permission("canViewLogs"))]


@router.get("/logs")
async def list_logs(admin: LogViewer):
    """Most recent audit entries, newest first."""
    return AuditService.list_logs()


@router.get("/visitors")
async def list_visitors(admin: LogViewer):
    return VisitorService.list_visitors()


@router.get("/users")
async def list_users(admin: UserManager):
    """Admin accounts with their permissions (no credentials)."""
    return AdminService.list_users()


@router.post("/users/add")
async def add_user(request: Request, admin: UserManager, body: AdminUserCreate):
    username = AdminService.add_user(body.username, body.password, body.permissions)
    AuditService.log_action(admin.username, "ADD_USER", f"Added user {username}", client_ip(request))
    return {"success": True}


@router.post("/users/delete")
async def delete_user(request: Request, admin: UserManager, body: AdminUserDelete):
    """Delete an account. The root admin can't be deleted."""
    AdminService.delete_user(body.target_user)
    AuditService.log_action(admin.username, "DEL_USER", f"Deleted user {body.target_user}", client_ip(request))
    return {"success": True}
