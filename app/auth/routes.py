# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Login issues a signed session cookie plus a CSRF token the admin panel
# keeps in memory and echoes on every write.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from redis.exceptions import RedisError

from app.auth.dependencies import get_current_admin, get_current_admin_optional
from app.auth.models import AdminSession, SessionResponse
from app.auth.security import create_session_token, revoke_session
from app.config import settings
from app.limiter import limiter
from core.models.admin import LoginRequest, LoginResponse, PasswordChange
from core.services.admin_service import AdminService
from core.services.audit_service import AuditService
from lib.utils import client_ip

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(request: Request, response: Response, body: LoginRequest) -> LoginResponse:
    """
    Log in with username and password.

    Raises:
        401: Unknown user or wrong password
        429: Too many attempts from this address
    """
    permissions = AdminService.authenticate(body.username, body.password)
    token, csrf_token = create_session_token(body.username, permissions)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )

    AuditService.log_action(body.username, "LOGIN", "User logged in", client_ip(request))
    logger.info(f"Admin login: {body.username}")
    return LoginResponse(csrf_token=csrf_token, permissions=permissions)


@router.get("/me", response_model=SessionResponse)
async def get_session(
    admin: Annotated[AdminSession | None, Depends(get_current_admin_optional)],
) -> SessionResponse:
    """
    Current session, so a reloaded admin panel can recover its CSRF token.

    Raises:
        401: No valid session
    """
    if admin is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session Expired",
        )
    return SessionResponse(
        username=admin.username,
        permissions=admin.permissions,
        csrf_token=admin.csrf_token,
    )


@router.post("/logout")
async def logout(
    response: Response,
    admin: Annotated[AdminSession | None, Depends(get_current_admin_optional)],
) -> dict:
    """Revoke the current session token and clear the cookie."""
    if admin is not None:
        try:
            revoke_session(admin)
        except RedisError as e:
            logger.error(f"Could not revoke session for {admin.username}: {e}")
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)
    return {"success": True}


@router.post("/change-password")
async def change_password(
    request: Request,
    admin: Annotated[AdminSession, Depends(get_current_admin)],
    body: PasswordChange,
) -> dict:
    """Change the logged-in admin's password."""
    AdminService.change_password(admin.username, body.current_password, body.new_password)
    AuditService.log_action(admin.username, "CHANGE_PASS", "Password updated", client_ip(request))
    return {"success": True}
