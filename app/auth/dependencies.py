# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for admin authentication.
#
# Usage:
#   from app.auth import get_current_admin, require_permission
#
#   @router.post("/items")
#   async def create(admin: AdminSession = Depends(require_permission("canEdit"))):
#       ...
# =============================================================================

import hmac
import logging
from typing import Callable

from fastapi import Depends, HTTPException, Request, status

from app.auth.models import AdminSession
from app.auth.security import CSRF_HEADER, SessionTokenError, decode_session_token
from app.config import settings

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


async def get_current_admin(request: Request) -> AdminSession:
    """
    Extract and validate the admin session from the session cookie.

    State-changing requests must also carry the session's CSRF token in
    the x-csrf-token header.

    Raises:
        HTTPException: 401 without a valid session, 403 on CSRF mismatch
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    try:
        session = decode_session_token(token)
    except SessionTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    if request.method not in SAFE_METHODS:
        sent = request.headers.get(CSRF_HEADER, "")
        if not hmac.compare_digest(sent.encode(), session.csrf_token.encode()):
            logger.warning(f"CSRF token mismatch for {session.username} on {request.url.path}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid CSRF token",
            )

    return session


async def get_current_admin_optional(request: Request) -> AdminSession | None:
    """Like get_current_admin, but None instead of an error when not logged in."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    try:
        return decode_session_token(token)
    except SessionTokenError:
        return None


def require_permission(permission: str) -> Callable:
    """
    Build a dependency that requires an admin with the given permission.

    Args:
        permission: Stored permission name, e.g. "canEdit"
    """

    async def dependency(admin: AdminSession = Depends(get_current_admin)) -> AdminSession:
        if not admin.permissions.allows(permission):
            logger.warning(f"{admin.username} lacks {permission}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )
        return admin

    return dependency
