"""FastAPI application entry point.

Daily check-in service for the API gateway.
"""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from starlette.middleware.base import BaseHTTPMiddleware

from gateway_checkin import __version__
from gateway_checkin.api import checkin
from gateway_checkin.config import get_settings
from gateway_checkin.logging_config import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from gateway_checkin.middleware.prometheus import setup_prometheus
from gateway_checkin.middleware.sentry import init_sentry
from gateway_checkin.schemas.common import error_envelope
from gateway_checkin.utils.db import close_db, engine, init_db
from gateway_checkin.utils.errors import CheckinError
from gateway_checkin.utils.json_utils import ORJSONResponse

settings = get_settings()

configure_logging(
    log_level=settings.log_level,
    json_logs=settings.app_env == "production",
    app_env=settings.app_env,
)
logger = get_logger(__name__)

sentry_enabled = init_sentry(
    dsn=settings.sentry_dsn,
    environment=settings.app_env,
    traces_sample_rate=settings.sentry_traces_sample_rate
    if settings.app_env == "production"
    else 0.0,
)
if sentry_enabled:
    logger.info("Sentry error tracking initialized")
elif settings.app_env == "production":
    logger.warning("Sentry DSN not configured - error tracking disabled")


# =============================================================================
# Lifespan Events
# =============================================================================


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting application...")

    try:
        logger.info("Initializing database connection...")
        # Schema is managed by alembic except for local SQLite databases
        await init_db(create_tables=settings.database_url.startswith("sqlite"))
        logger.info("Database connection established")
        logger.info("Application startup complete")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    yield

    logger.info("Shutting down application...")
    try:
        await close_db()
        logger.info("Database connection closed")
    except Exception as e:
        logger.error(f"Shutdown error: {e}")


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Gateway Check-in API",
    version=__version__,
    description="Daily check-in rewards for API gateway users",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)

prometheus_instrumentator = setup_prometheus(app, app_version=__version__)


# =============================================================================
# Middleware
# =============================================================================


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach X-Request-ID to every request, response and log line."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID")
        if not request_id:
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.start_time = datetime.now(timezone.utc)

        clear_context()
        bind_context(request_id=request_id)
        try:
            response = await call_next(request)

            response.headers["X-Request-ID"] = request_id

            duration = (
                datetime.now(timezone.utc) - request.state.start_time
            ).total_seconds()
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration=round(duration, 3),
            )
            return response
        finally:
            clear_context()


app.add_middleware(RequestIDMiddleware)

cors_origins = [origin.strip() for origin in settings.cors_origins.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID", "X-User-Id"],
    expose_headers=["X-Request-ID"],
)


# =============================================================================
# Error Handlers
# =============================================================================


def get_request_id(request: Request) -> str:
    """Get request ID from request state or headers."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("X-Request-ID", str(uuid.uuid4()))


def create_error_response(
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    """Create standardized error response for auth and transport errors."""
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        },
        "traceId": trace_id,
    }


@app.exception_handler(CheckinError)
async def checkin_error_handler(request: Request, exc: CheckinError) -> ORJSONResponse:
    """Business failures are reported in the envelope, not the status code."""
    trace_id = get_request_id(request)

    log = logger.error if exc.code in ("STORAGE_FAILURE", "CREDIT_FAILURE") else logger.info
    log(
        "checkin_error",
        code=exc.code,
        message=exc.message,
        details=exc.details,
        trace_id=trace_id,
    )

    return ORJSONResponse(
        status_code=status.HTTP_200_OK,
        content=error_envelope(exc.message),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """Malformed bodies and query parameters."""
    logger.info(
        "request_validation_failed",
        errors=exc.errors(),
        trace_id=get_request_id(request),
    )
    return ORJSONResponse(
        status_code=status.HTTP_200_OK,
        content=error_envelope("Invalid parameters"),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(
    request: Request, exc: HTTPException
) -> ORJSONResponse:
    """Handle HTTP exceptions."""
    trace_id = get_request_id(request)

    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = dict(exc.detail)
        content["traceId"] = trace_id
    else:
        content = create_error_response(
            code="HTTP_ERROR",
            message=str(exc.detail),
            trace_id=trace_id,
        )

    return ORJSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Handle unexpected exceptions."""
    trace_id = get_request_id(request)

    logger.error(
        "unexpected_error",
        error_type=type(exc).__name__,
        error_message=str(exc),
        trace_id=trace_id,
        exc_info=True,
    )

    message = "Internal server error"
    if settings.app_debug:
        message = f"{type(exc).__name__}: {exc}"

    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(message),
    )


# =============================================================================
# Health Check Endpoints
# =============================================================================


@app.get(
    "/health",
    tags=["Health"],
    summary="Health check endpoint",
    response_model=dict,
)
async def health_check() -> dict[str, Any]:
    """Check application health status.

    Returns:
        Health status including database connectivity.
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "services": {
            "database": "unknown",
        },
    }

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        health_status["services"]["database"] = "healthy"
    except Exception as e:
        health_status["services"]["database"] = f"unhealthy: {str(e)}"
        health_status["status"] = "degraded"
        logger.error(f"Database health check failed: {e}")

    return health_status


@app.get(
    "/health/live",
    tags=["Health"],
    summary="Liveness probe",
)
async def liveness_probe() -> dict[str, str]:
    """Kubernetes liveness probe endpoint."""
    return {"status": "alive"}


@app.get(
    "/health/ready",
    tags=["Health"],
    summary="Readiness probe",
)
async def readiness_probe():
    """Kubernetes readiness probe endpoint."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception as e:
        logger.error("readiness_probe_failed", error=str(e))
        return ORJSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready", "error": str(e)},
        )


# =============================================================================
# API Routers
# =============================================================================


API_V1_PREFIX = "/api/v1"

app.include_router(checkin.router, prefix=API_V1_PREFIX)


@app.get(
    "/",
    tags=["Root"],
    summary="API root endpoint",
)
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "name": "Gateway Check-in API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


# =============================================================================
# Development / Production Server
# =============================================================================


if __name__ == "__main__":
    import uvicorn

    if settings.app_debug:
        uvicorn.run(
            "gateway_checkin.main:app",
            host=settings.app_host,
            port=settings.app_port,
            reload=True,
            log_level=settings.log_level.lower(),
        )
    else:
        uvicorn.run(
            "gateway_checkin.main:app",
            host=settings.app_host,
            port=settings.app_port,
            workers=settings.uvicorn_workers,
            log_level=settings.log_level.lower(),
            access_log=True,
            limit_concurrency=1000,
            timeout_keep_alive=5,
        )
