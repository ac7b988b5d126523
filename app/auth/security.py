# =============================================================================
# app/auth/security.py - Session Tokens
# =============================================================================
# Admin sessions are HS256 JWTs signed with SECRET_KEY and stored in an
# httpOnly cookie. Each token carries a CSRF token the client must echo in
# the x-csrf-token header on state-changing requests. Logout revokes a
# token early by putting its jti on a Redis denylist until it expires.
# =============================================================================

import logging
import secrets
import time

import redis
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError
from redis.exceptions import RedisError

from app.auth.models import AdminSession, TokenPayload
from app.config import settings
from core.models.admin import AdminPermissions

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
CSRF_HEADER = "x-csrf-token"
REVOKED_KEY_PREFIX = "coreconnect:revoked-session:"


class SessionTokenError(Exception):
    """Raised when a session cookie can't be trusted."""


def create_session_token(username: str, permissions: AdminPermissions) -> tuple[str, str]:
    """
    Issue a session token.

    Returns:
        Tuple of (signed token, csrf token)
    """
    csrf_token = secrets.token_hex(32)
    issued_at = int(time.time())
    claims = {
        "sub": username,
        "permissions": permissions.model_dump(by_alias=True),
        "csrf": csrf_token,
        "jti": secrets.token_hex(16),
        "iat": issued_at,
        "exp": issued_at + settings.session_ttl_seconds,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM), csrf_token


def decode_session_token(token: str) -> AdminSession:
    """
    Verify a session token and return the session it describes.

    Raises:
        SessionTokenError: If the token is expired, revoked, tampered with, or malformed
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        payload = TokenPayload.model_validate(claims)
    except ExpiredSignatureError:
        raise SessionTokenError("Session expired")
    except (JWTError, ValidationError) as e:
        logger.warning(f"Session token rejected: {e}")
        raise SessionTokenError("Invalid session")

    if is_session_revoked(payload.jti):
        raise SessionTokenError("Session revoked")

    return AdminSession(
        username=payload.sub,
        permissions=AdminPermissions.model_validate(payload.permissions),
        csrf_token=payload.csrf,
        session_id=payload.jti,
        expires_at=payload.exp,
    )


# =============================================================================
# Revocation
# =============================================================================

def get_redis_client():
    """Get Redis client for the session denylist."""
    return redis.from_url(settings.REDIS_URL)


def revoke_session(session: AdminSession) -> None:
    """
    Deny a session token for the rest of its lifetime.

    Raises:
        RedisError: If the denylist can't be written
    """
    ttl = session.expires_at - int(time.time())
    if ttl <= 0:
        return
    get_redis_client().setex(f"{REVOKED_KEY_PREFIX}{session.session_id}", ttl, session.username)
    logger.info(f"Revoked session for {session.username}")


def is_session_revoked(session_id: str) -> bool:
    """Whether logout revoked this session. An unreachable Redis counts as not revoked."""
    try:
        return bool(get_redis_client().exists(f"{REVOKED_KEY_PREFIX}{session_id}"))
    except RedisError as e:
        logger.warning(f"Session denylist unavailable: {e}")
        return False
