# =============================================================================
# app/limiter.py - Request Rate Limiting
# =============================================================================
# One slowapi Limiter shared by the app and the routers that tighten it.
# Every route gets API_RATE_LIMIT through SlowAPIMiddleware; login is
# decorated with the stricter LOGIN_RATE_LIMIT.
# =============================================================================

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.API_RATE_LIMIT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URL,
)
