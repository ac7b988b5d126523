# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - Input sanitization for anything stored and later rendered by the SPA
# - Client IP extraction for audit entries
# =============================================================================

from typing import Any
from urllib.parse import urlparse

import nh3
from fastapi import Request

# Fields the SPA tracks per browser and must never be persisted
CLIENT_ONLY_FIELDS = frozenset({"isUnread", "isLiked", "likes"})

SAFE_URL_SCHEMES = frozenset({"http", "https"})


# =============================================================================
# Sanitization
# =============================================================================

def sanitize_html(value: Any) -> str:
    """
    Clean rich text against nh3's tag allow-list.

    Safe formatting (b, i, a, p, lists, ...) survives; scripts, event
    handlers and unknown tags are removed. Bare ampersands are kept as-is,
    so cleaning an already-clean value returns it unchanged.

    Example:
        sanitize_html('<p onclick="x()">Q&A</p><script>x()</script>')  # '<p>Q&A</p>'
    """
    if value is None:
        return ""
    return _keep_ampersands(nh3.clean(str(value)))


def sanitize_text(value: Any, max_length: int | None = None) -> str:
    """
    Strip every tag from plain-text fields (titles, subjects, names).

    Args:
        value: Raw value (None becomes "")
        max_length: Truncate the cleaned result to this many characters

    Example:
        sanitize_text("<b>R&D</b> notes")  # "R&D notes"
    """
    if value is None:
        return ""
    cleaned = _keep_ampersands(nh3.clean(str(value), tags=set(), attributes={}))
    if max_length is not None:
        cleaned = cleaned[:max_length]
    return cleaned


def _keep_ampersands(cleaned: str) -> str:
    # nh3 serializes text "&" as "&amp;"; "<" stays escaped so no markup can reappear
    return cleaned.replace("&amp;", "&")


def safe_url(value: Any) -> str | None:
    """
    Validate a link field without altering it.

    Returns:
        The trimmed URL, or None for empty values

    Raises:
        ValueError: If the URL isn't http(s)
    """
    if not value:
        return None
    url = str(value).strip()
    if urlparse(url).scheme.lower() not in SAFE_URL_SCHEMES or any(ch in url for ch in "<>\"'"):
        raise ValueError(f"Unsupported URL: {url[:80]}")
    return url


def strip_client_fields(payload: dict[str, Any], *extra: str) -> dict[str, Any]:
    """Drop browser-side state (likes, unread flags) before a write."""
    dropped = CLIENT_ONLY_FIELDS.union(extra)
    return {key: value for key, value in payload.items() if key not in dropped}


# =============================================================================
# Requests
# =============================================================================

def client_ip(request: Request | None) -> str | None:
    """Best-effort client address, honouring a reverse proxy."""
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
