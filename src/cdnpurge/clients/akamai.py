"""Akamai purge client for the Fast Purge (CCU v3) API.

Requests are authenticated with EdgeGrid signatures. Each call, from
connect to the last byte of the response, is bounded by
``settings.akamai_timeout`` (10 s by default).
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Literal, Sequence

import httpx
import orjson

from cdnpurge.clients.base import INVALID_PURGE_CONFIG
from cdnpurge.clients.edgegrid import EdgeGridSigner
from cdnpurge.config import settings
from cdnpurge.errors import PurgeRequestError
from cdnpurge.observability.metrics import get_metrics
from cdnpurge.utils import assert_required_properties, chunked, next_request_id

if TYPE_CHECKING:
    from cdnpurge.context import PurgeContext
    from cdnpurge.models import CdnConfig

PurgeType = Literal["tag", "url"]

AKAMAI_PURGE_URL = "https://{endpoint}/ccu/v3/delete/{type}/production"


class AkamaiPurgeClient:
    name = "akamai"
    batch_size = 256

    def __init__(self, http: httpx.AsyncClient) -> None:
        self.http = http

    def validate(self, config: CdnConfig) -> None:
        assert_required_properties(
            config,
            INVALID_PURGE_CONFIG,
            "host",
            "endpoint",
            "clientSecret",
            "clientToken",
            "accessToken",
        )

    def supports_purge_by_key(self) -> bool:
        return True

    async def send_purge_request(
        self, config: CdnConfig, purge_type: PurgeType, objects: list[str]
    ) -> httpx.Response:
        """Send one signed delete request for ``objects``."""
        url = AKAMAI_PURGE_URL.format(endpoint=config.endpoint, type=purge_type)
        body = orjson.dumps({"objects": objects})
        signer = EdgeGridSigner(
            client_token=config.client_token or "",
            access_token=config.access_token or "",
            client_secret=config.client_secret or "",
        )
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": signer.sign("POST", url, body),
        }
        # total deadline; httpx timeouts only bound each phase
        async with asyncio.timeout(settings.akamai_timeout):
            return await self.http.post(url, headers=headers, content=body)

    async def purge(
        self, ctx: PurgeContext, config: CdnConfig, keys: Sequence[str] | None
    ) -> None:
        """Purge by cache tag."""
        await self._purge(ctx, config, "tag", keys)

    async def purge_urls(
        self, ctx: PurgeContext, config: CdnConfig, urls: Sequence[str] | None
    ) -> None:
        """Purge by absolute URL."""
        await self._purge(ctx, config, "url", urls)

    async def _purge(
        self,
        ctx: PurgeContext,
        config: CdnConfig,
        purge_type: PurgeType,
        objects: Sequence[str] | None,
    ) -> None:
        if not objects:
            return

        site_id = ctx.site_id
        host = config.host
        metrics = get_metrics()

        for batch in chunked(objects, self.batch_size):
            request_id = next_request_id(ctx)
            ctx.log.info(
                f"{site_id} [{request_id}] [akamai] {host} purging {purge_type}s "
                f"'{','.join(batch)}'"
            )
            with metrics.track_request(self.name, len(batch)):
                try:
                    resp = await self.send_purge_request(config, purge_type, batch)
                except (httpx.HTTPError, TimeoutError) as e:
                    msg = (
                        f"{site_id} [{request_id}] [akamai] {host} {purge_type} purge failed: "
                        f"{e!r}"
                    )
                    ctx.log.error(msg)
                    raise PurgeRequestError(msg, provider=self.name) from e

                if not resp.is_success:
                    msg = (
                        f"{site_id} [{request_id}] [akamai] {host} {purge_type} purge failed: "
                        f"{resp.status_code} - {resp.text}"
                    )
                    ctx.log.error(msg)
                    raise PurgeRequestError(msg, provider=self.name, status=resp.status_code)

            ctx.log.info(
                f"{site_id} [{request_id}] [akamai] {host} {purge_type} purge of {len(batch)} "
                f"object(s) succeeded: {resp.status_code} - {resp.text}"
            )
