"""FastAPI application factory for the purge service.

Creates the application with:
- The bulk cache purge endpoint (/{org}/{site}/cache)
- The Prometheus metrics endpoint (/metrics)
- A shared outbound HTTP client for purge calls, closed on shutdown
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from cdnpurge.api.routers import cache, metrics
from cdnpurge.config import settings
from cdnpurge.observability import configure_logging, get_metrics
from cdnpurge.site_config import FileSiteConfigResolver, SiteConfigResolver

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and metrics, own the HTTP client unless one was injected."""
    configure_logging(json_format=settings.log_json, level=settings.log_level)
    get_metrics()

    owns_client = getattr(app.state, "http", None) is None
    if owns_client:
        app.state.http = httpx.AsyncClient(timeout=settings.http_timeout)

    logger.info(f"Starting {settings.app_name} ({settings.env})")

    yield

    if owns_client:
        await app.state.http.aclose()
        app.state.http = None
    logger.info(f"{settings.app_name} shutdown complete")


def create_app(
    site_config_resolver: SiteConfigResolver | None = None,
    http: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        site_config_resolver: Source of site configurations; defaults to
            JSON files under ``settings.site_config_dir``
        http: Outbound HTTP client; created by the lifespan when omitted
    """
    app = FastAPI(
        title="CDN Purge",
        description="Cache invalidation for catalog changes",
        version="0.1.0",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    app.state.site_config_resolver = site_config_resolver or FileSiteConfigResolver(
        settings.site_config_dir
    )
    app.state.http = http

    app.include_router(cache.router)
    if settings.enable_metrics:
        app.include_router(metrics.router)

    return app
