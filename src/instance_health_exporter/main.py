"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import CollectorRegistry

from instance_health_exporter import __version__
from instance_health_exporter.api.routes import api_router
from instance_health_exporter.config import Settings, get_settings
from instance_health_exporter.core.collector import InstanceHealthCollector
from instance_health_exporter.middleware.logging import LoggingMiddleware, configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown events."""
    settings: Settings = app.state.settings

    configure_logging(
        level=settings.logging.level,
        format=settings.logging.format,
        color=settings.logging.color,
    )

    logger.info(
        "Starting instance health exporter",
        extra={
            "version": __version__,
            "host": settings.server.host,
            "port": settings.server.port,
            "fqdn": settings.target.fqdn,
        },
    )

    try:
        settings.validate_required()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise

    logger.debug(f"Endpoint url set to: {settings.target.url}")
    logger.info(f"Ready to take requests at: {settings.server.host}:{settings.server.port}")

    yield

    logger.info("Shutting down instance health exporter")
    if app.state.owns_client:
        app.state.http_client.close()


def create_app(settings: Settings | None = None, client: httpx.Client | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing.
        client: Optional HTTP client for upstream calls. When omitted the
            application creates one and closes it on shutdown.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="instance-health-exporter",
        description="Prometheus exporter for the Atlassian Instance Health REST endpoint",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.owns_client = client is None
    app.state.http_client = client or httpx.Client(timeout=settings.target.timeout_seconds)

    # A registry per app, so the default process registry stays untouched
    registry = CollectorRegistry()
    registry.register(InstanceHealthCollector(settings.target, app.state.http_client))
    app.state.registry = registry

    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(api_router)

    return app


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Handle value errors (configuration, etc.)."""
    return JSONResponse(
        status_code=400,
        content={
            "detail": str(exc),
        },
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        "Unhandled exception",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "request_id": request_id,
        },
    )


def run() -> None:
    """Serve the exporter with uvicorn on the configured address."""
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )
