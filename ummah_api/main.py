import hmac
import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from ummah_api import __version__
from ummah_api.api.routes import register_routes
from ummah_api.core.config import settings
from ummah_api.core.db import DatabaseConnection, dispose_database, provision_database
from ummah_api.core.errors import UmmahError, get_status_code
from ummah_api.core.observability import (
    ObservabilityMiddleware,
    configure_structured_logging,
    extract_request_context,
    metrics_endpoint,
)
from ummah_api.repos.storage import Storage

# Configure structured logging before creating logger
if settings.observability_structured_logs:
    configure_structured_logging(settings.app_log_level)

logger = logging.getLogger(__name__)


def _sanitize_error_details(details: dict[str, Any]) -> dict[str, Any]:
    """
    Sanitize error details to prevent information leakage in production.

    Removes file paths and SQL fragments from string values.

    Args:
        details: Original error details dictionary

    Returns:
        Sanitized details dictionary
    """
    if not settings.is_production:
        return details

    sanitized = {}
    sensitive_patterns = [
        r"[/\\][\w/-]+\.py",  # File paths
        r"SELECT.*FROM",  # SQL queries
        r"INSERT INTO.*VALUES",
        r"UPDATE.*SET",
        r"DELETE FROM",
    ]

    for key, value in details.items():
        if isinstance(value, str):
            for pattern in sensitive_patterns:
                if re.search(pattern, value, re.IGNORECASE):
                    sanitized[key] = "[REDACTED]"
                    break
            else:
                sanitized[key] = value
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_error_details(value)
        else:
            sanitized[key] = value

    return sanitized


def create_app(storage: Storage | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Sets up:
    - Storage facade (provisioned from settings unless one is injected)
    - Observability middleware (metrics, request tracking)
    - Exception handlers for domain errors
    - API routers
    - Metrics endpoint for Prometheus scraping

    Args:
        storage: Pre-built storage facade; tests inject demo or SQLite-backed ones
    """
    connection: DatabaseConnection | None = None
    if storage is None:
        connection = provision_database(settings)
        storage = Storage.from_connection(connection)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            f"{settings.app_name} started",
            extra={"demo_mode": storage.demo_mode, "node_env": settings.node_env},
        )
        yield
        if connection is not None:
            await dispose_database(connection)

    app = FastAPI(
        title="Ummah Social API",
        description="Social platform backend: posts, dua requests, communities, events and moderation",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.storage = storage

    # ============================================================================
    # Observability Middleware
    # ============================================================================

    if settings.observability_enabled:
        app.add_middleware(
            ObservabilityMiddleware,
            request_id_header=settings.observability_request_id_header,
        )

    # ============================================================================
    # Exception Handlers
    # ============================================================================

    @app.exception_handler(UmmahError)
    async def ummah_error_handler(request: Request, exc: UmmahError) -> JSONResponse:
        """
        Map domain errors to their HTTP status and a structured body.

        Args:
            request: The incoming request
            exc: The domain exception raised

        Returns:
            JSON response with error details
        """
        status_code = get_status_code(exc)

        context = {
            "details": exc.details,
            "path": request.url.path,
            **extract_request_context(request),
        }
        if status_code >= 500:
            logger.error(f"{exc.__class__.__name__}: {exc.message}", extra=context)
        else:
            logger.warning(f"{exc.__class__.__name__}: {exc.message}", extra=context)

        return JSONResponse(
            status_code=status_code,
            content={
                "error": exc.__class__.__name__,
                "message": exc.message,
                "details": _sanitize_error_details(exc.details),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Render HTTP exceptions in the same body format as domain errors."""
        if exc.status_code >= 500:
            logger.error(
                f"HTTP {exc.status_code}: {exc.detail}",
                extra={"path": request.url.path, **extract_request_context(request)},
            )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "HTTPException",
                "message": exc.detail,
                "details": {},
            },
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Catch-all handler for unexpected exceptions.

        Storage create/update failures end up here. The full exception is
        logged; the client gets a generic 500 without internal details.
        """
        context = {
            "path": request.url.path if request.url else "unknown",
            **extract_request_context(request),
        }
        logger.error(f"Unhandled exception: {exc}", exc_info=True, extra=context)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "InternalServerError",
                "message": "An unexpected error occurred",
                "details": {},
            },
        )

    # ============================================================================
    # Router Registration
    # ============================================================================

    register_routes(app)

    # ============================================================================
    # Metrics Endpoint (Prometheus)
    # ============================================================================

    async def protected_metrics(request: Request) -> Response:
        """
        Prometheus metrics endpoint.

        When METRICS_TOKEN is configured the X-Metrics-Token header must match it.
        """
        expected_token = settings.metrics_token
        if expected_token:
            # Constant-time comparison
            metrics_token = request.headers.get("X-Metrics-Token")
            if not hmac.compare_digest(metrics_token or "", expected_token):
                logger.warning(
                    "Unauthorized metrics access attempt",
                    extra={
                        "security_event": True,
                        "event_type": "METRICS_ACCESS_DENIED",
                        "client_ip": request.client.host if request.client else "unknown",
                    },
                )
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Invalid metrics token",
                )

        return metrics_endpoint()

    if settings.observability_enabled:
        app.add_route("/metrics", protected_metrics)

    return app
