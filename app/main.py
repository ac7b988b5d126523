# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Core Connect API.
# Run with: uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.config import settings
from app.exceptions import (
    CoreConnectException,
    coreconnect_exception_handler,
    rate_limit_exception_handler,
    supabase_exception_handler,
)
from app.limiter import limiter
from app.routers import (
    admin,
    backup,
    content,
    health,
    notifications,
    schedule,
    tasks,
    users,
    visitors,
)
from app.auth import routes as auth_routes
from core.services.admin_service import AdminService
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: make sure the root admin account exists
    - Shutdown: log
    """
    logger.info(f"Starting Core Connect API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    try:
        if AdminService.ensure_root_admin():
            logger.info("Root admin account bootstrapped from ADMIN_PASSWORD")
    except Exception as e:
        logger.error(f"Could not verify root admin account: {e}")

    if not settings.push_enabled:
        logger.warning("VAPID keys not configured; push notifications disabled")

    yield

    logger.info("Shutting down Core Connect API")


# Create FastAPI application
app = FastAPI(
    title="Core Connect API",
    description="""
## Student Portal Backend

Serves the portal's sectors, posts and lecture timetable, and the admin
panel that manages them.

### Highlights

- **Sector views**: pinned posts first, then each sector's sort policy
  (newest, oldest, alphabetical, or manual drag-and-drop order)
- **Lecture schedule**: today's lectures and the weekly timetable per batch
- **Admin panel**: cookie session with CSRF token and per-account permissions
- **Web push**: new posts are broadcast to subscribers by a Celery worker
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Admin login, session and password"},
        {"name": "Content", "description": "Public config, sectors and items"},
        {"name": "Schedule", "description": "Lecture timetable"},
        {"name": "Visitors", "description": "Anonymous visitor heartbeat"},
        {"name": "Notifications", "description": "Web push subscription"},
        {"name": "Admin", "description": "Content management"},
        {"name": "Users", "description": "Admin accounts, audit and visitor logs"},
        {"name": "Backup", "description": "Full export and restore"},
        {"name": "Tasks", "description": "Track background task progress"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Credentials (the session cookie) require explicit origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(CoreConnectException)
async def handle_coreconnect_exception(request: Request, exc: CoreConnectException):
    """Handle custom Core Connect exceptions."""
    return await coreconnect_exception_handler(request, exc)


@app.exception_handler(RateLimitExceeded)
async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit hit on {request.url.path}: {exc.detail}")
    return await rate_limit_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_exception(request: Request, exc: SupabaseClientError):
    logger.error(f"Supabase error on {request.url.path}: {exc}")
    return await supabase_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Public content endpoints
app.include_router(
    content.router,
    prefix="/api/v1",
    tags=["Content"]
)

# Lecture schedule endpoints
app.include_router(
    schedule.router,
    prefix="/api/v1/schedule",
    tags=["Schedule"]
)

# Visitor analytics
app.include_router(
    visitors.router,
    prefix="/api/v1/visitor",
    tags=["Visitors"]
)

# Web push subscription
app.include_router(
    notifications.router,
    prefix="/api/v1/notifications",
    tags=["Notifications"]
)

# Content management
app.include_router(
    admin.router,
    prefix="/api/v1/admin",
    tags=["Admin"]
)

# Accounts and logs
app.include_router(
    users.router,
    prefix="/api/v1/admin",
    tags=["Users"]
)

# Export / restore
app.include_router(
    backup.router,
    prefix="/api/v1/admin",
    tags=["Backup"]
)

# Task status endpoints
app.include_router(
    tasks.router,
    prefix="/api/v1/tasks",
    tags=["Tasks"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Core Connect API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
