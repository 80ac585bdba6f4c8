"""Execution context threaded through a purge operation.

A ``PurgeContext`` lives for one logical request. It carries the site being
served, the cached site configuration, secrets from the environment, the
logger, the HTTP client used for outbound calls, and the sub-request counter
that correlates log lines of the individual provider calls.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Mapping

import httpx

from cdnpurge.config import settings
from cdnpurge.models import HelixConfig

MANAGED_PURGE_TOKEN_ENV = "HLX_ADMIN_MANAGED_PURGEPROXY_TOKEN"


@dataclass
class RequestInfo:
    """Org/site coordinates of the request that triggered a purge."""

    org: str
    site: str
    store_code: str | None = None
    store_view_code: str | None = None

    @property
    def site_key(self) -> str:
        return f"{self.org}--{self.site}"

    @property
    def site_id(self) -> str:
        """Log prefix identifying the site and, when known, the store view."""
        stores = [code for code in (self.store_code, self.store_view_code) if code]
        return "/".join([self.site_key, *stores])


@dataclass
class ContextAttributes:
    """Per-request mutable state."""

    helix_config_cache: HelixConfig | Mapping[str, Any] | None = None
    sub_request_id: int = 0


@dataclass
class PurgeContext:
    config: RequestInfo
    http: httpx.AsyncClient
    attributes: ContextAttributes = field(default_factory=ContextAttributes)
    env: Mapping[str, str] = field(default_factory=dict)
    log: logging.Logger = field(default_factory=lambda: logging.getLogger("cdnpurge"))

    @property
    def site_id(self) -> str:
        return self.config.site_id

    @property
    def helix_config(self) -> HelixConfig | None:
        """Cached site configuration, parsed on first access."""
        cached = self.attributes.helix_config_cache
        if cached is None or isinstance(cached, HelixConfig):
            return cached
        parsed = HelixConfig.model_validate(cached)
        self.attributes.helix_config_cache = parsed
        return parsed

    @property
    def managed_purge_token(self) -> str | None:
        return self.env.get(MANAGED_PURGE_TOKEN_ENV) or settings.managed_purge_proxy_token

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        config: RequestInfo,
        helix_config: HelixConfig | Mapping[str, Any] | None = None,
        env: Mapping[str, str] | None = None,
    ) -> AsyncIterator["PurgeContext"]:
        """Create a context owning its own HTTP client for the block's duration."""
        async with httpx.AsyncClient(timeout=settings.http_timeout) as http:
            yield cls(
                config=config,
                http=http,
                attributes=ContextAttributes(helix_config_cache=helix_config),
                env=env or {},
            )
