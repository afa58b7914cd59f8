"""FastAPI application for the yacht charter site.

Serves the public catalog pages, the staff back office, staff sign-in and the
chat relay. Admin routes are authorized per request from the Supabase access
token; public routes are open.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from ..admin.errors import (
    AdminError,
    DraftValidationError,
    RecordNotFoundError,
    TransitionNotAllowedError,
)
from ..config import get_settings
from ..storage.base import BookingConflictError, GatewayError
from ..version import APP_VERSION, GIT_SHA_SHORT
from .admin import router as admin_router
from .chat import router as chat_router
from .limits import limiter
from .public import consent_router
from .public import router as public_router
from .session import router as session_router

logger = logging.getLogger(__name__)

BOOKING_CONFLICT_MESSAGE = "Le date si sovrappongono a una prenotazione confermata"
GATEWAY_ERROR_MESSAGE = "Errore di comunicazione con il database"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        """Add security headers to response."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Only add HSTS in production (when not localhost)
        if request.url.hostname not in ("localhost", "127.0.0.1"):
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response


def admin_error_status(exc: AdminError) -> int:
    if isinstance(exc, DraftValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, TransitionNotAllowedError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, RecordNotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_502_BAD_GATEWAY


async def admin_error_handler(request: Request, exc: AdminError) -> JSONResponse:
    code = admin_error_status(exc)
    if code >= 500:
        logger.error("Admin action %s failed on %s: %s", exc.action, request.url.path, exc.message)
    return JSONResponse({"message": exc.message}, status_code=code)


async def booking_conflict_handler(request: Request, exc: BookingConflictError) -> JSONResponse:
    logger.info("Booking conflict on %s: %s", request.url.path, exc)
    return JSONResponse({"message": BOOKING_CONFLICT_MESSAGE}, status_code=status.HTTP_409_CONFLICT)


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger.error("Unhandled gateway failure on %s: %s", request.url.path, exc)
    return JSONResponse({"message": GATEWAY_ERROR_MESSAGE}, status_code=status.HTTP_502_BAD_GATEWAY)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Owns the outbound HTTP client used by the chat relay.
    """
    settings = get_settings()

    # Log startup banner with version info
    logger.info("=" * 60)
    logger.info("YachtMe API v%s (build: %s)", APP_VERSION, GIT_SHA_SHORT)
    logger.info("=" * 60)

    if not settings.chat_webhook_url:
        logger.warning("CHAT_WEBHOOK_URL not set - chat relay will answer with a configuration error")

    async with httpx.AsyncClient(timeout=settings.chat_timeout_seconds) as client:
        app.state.http_client = client
        yield

    logger.info("Shutting down YachtMe API")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="YachtMe API",
        description="Yacht charter catalog, back office and chat relay",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Handlers are matched by exception class hierarchy; the conflict subclass wins over GatewayError
    app.add_exception_handler(AdminError, admin_error_handler)
    app.add_exception_handler(BookingConflictError, booking_conflict_handler)
    app.add_exception_handler(GatewayError, gateway_error_handler)

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers middleware (runs after CORS)
    app.add_middleware(SecurityHeadersMiddleware)

    # Health check endpoint with rate limiting
    @app.get("/health")
    @limiter.limit("60/minute")
    async def health_check(request: Request):
        return {
            "status": "healthy",
            "service": "yachtme-api",
            "version": APP_VERSION,
            "git_sha": GIT_SHA_SHORT,
        }

    app.include_router(public_router)
    app.include_router(consent_router)
    app.include_router(session_router)
    app.include_router(admin_router)
    app.include_router(chat_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "yachtme.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
