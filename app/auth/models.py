# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for admin session data.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field

from core.models.admin import AdminPermissions


class AdminSession(BaseModel):
    """
    Authenticated admin extracted from the session cookie.

    This is everything the token carries; no database lookup is needed
    to authorize a request.
    """

    model_config = ConfigDict(frozen=True)

    username: str
    permissions: AdminPermissions
    csrf_token: str
    session_id: str  # Token jti, the key logout revokes
    expires_at: int


class SessionResponse(BaseModel):
    """Session info returned to the admin panel on page load."""

    model_config = ConfigDict(populate_by_name=True)

    authenticated: bool = True
    username: str
    permissions: AdminPermissions
    csrf_token: str = Field(..., alias="csrfToken")


class TokenPayload(BaseModel):
    """Decoded session token claims."""

    sub: str  # Username
    permissions: dict = Field(default_factory=dict)
    csrf: str
    jti: str  # Session id
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
