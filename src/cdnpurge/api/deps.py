"""Shared FastAPI dependencies for the purge API.

Collaborators live on ``app.state`` and are created by the application
lifespan (or injected by tests):
- ``site_config_resolver``: SiteConfigResolver
- ``http``: httpx.AsyncClient used for outbound purge calls
"""

from __future__ import annotations

import httpx
from fastapi import Request

from cdnpurge.site_config import SiteConfigResolver


def get_site_config_resolver(request: Request) -> SiteConfigResolver:
    return request.app.state.site_config_resolver


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http
