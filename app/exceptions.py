# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors tell the caller how to fix the problem, not just what failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from lib.supabase_client import SupabaseClientError


class CoreConnectException(Exception):
    """
    Base exception for the Core Connect API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CORECONNECT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Content Exceptions
# =============================================================================

class ItemNotFoundError(CoreConnectException):
    """Raised when an item ID doesn't exist."""

    def __init__(self, item_id: str):
        super().__init__(
            message=f"Item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            status_code=404,
            suggestion="Check that the item id is correct and the item hasn't been deleted",
            details={"item_id": item_id}
        )


class InvalidItemError(CoreConnectException):
    """Raised when an item write carries a field that can't be stored."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            message=f"Invalid {field}: {reason}",
            code="INVALID_ITEM",
            status_code=400,
            suggestion="Links must be http:// or https:// URLs",
            details={"field": field},
        )


class SectorNotFoundError(CoreConnectException):
    """Raised when a sector ID isn't configured."""

    def __init__(self, sector_id: str):
        super().__init__(
            message=f"Sector not found: {sector_id}",
            code="SECTOR_NOT_FOUND",
            status_code=404,
            suggestion="List configured sectors with GET /sectors",
            details={"sector_id": sector_id}
        )


class ReorderCommitError(CoreConnectException):
    """
    Raised when persisting a reorder batch fails.

    The caller must not treat the submitted order as saved; the
    failed ids tell it which rows still hold their previous position.
    """

    def __init__(self, error: str, failed_ids: list[str] | None = None):
        super().__init__(
            message=f"Reorder failed: {error}",
            code="REORDER_COMMIT_FAILED",
            status_code=502,
            suggestion="Reload the sector to get the persisted order, then retry",
            details={"failed_ids": failed_ids or []}
        )


# =============================================================================
# Admin Exceptions
# =============================================================================

class InvalidCredentialsError(CoreConnectException):
    """Raised when a login or password check fails."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message=message,
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


class AdminUserError(CoreConnectException):
    """Raised when an admin user operation is rejected."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(
            message=message,
            code="ADMIN_USER_ERROR",
            status_code=status_code,
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class FileTooLargeError(CoreConnectException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(CoreConnectException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def coreconnect_exception_handler(
    request: Request,
    exc: CoreConnectException
) -> JSONResponse:
    """
    Convert CoreConnectException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def supabase_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """Database/storage failures surface as 503 with the client's suggestion."""
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=503, content=content)


async def rate_limit_exception_handler(
    request: Request,
    exc: RateLimitExceeded
) -> JSONResponse:
    """Too many requests from one address; same error shape as the rest of the API."""
    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Too many requests: {exc.detail}",
            "code": "RATE_LIMITED",
            "suggestion": "Wait a few minutes before trying again",
        },
    )
