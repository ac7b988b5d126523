# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Cookie-based admin sessions signed with SECRET_KEY.
#
# Usage:
#   from app.auth import get_current_admin, AdminSession
#
#   @router.get("/protected")
#   async def protected(admin: AdminSession = Depends(get_current_admin)):
#       return {"username": admin.username}
# =============================================================================

from app.auth.dependencies import (
    get_current_admin,
    get_current_admin_optional,
    require_permission,
)
from app.auth.models import AdminSession, SessionResponse

__all__ = [
    "get_current_admin",
    "get_current_admin_optional",
    "require_permission",
    "AdminSession",
    "SessionResponse",
]
