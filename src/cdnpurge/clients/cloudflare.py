"""Cloudflare purge client using cache tags.

Cloudflare accepts at most 30 tags per purge call. Batches are fanned out
through a bounded queue. The API can answer 200 with ``"success": false``;
that is treated as a failure and reported together with the ``cf-ray``
trace header.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import httpx
import orjson

from cdnpurge.clients.base import INVALID_PURGE_CONFIG
from cdnpurge.config import settings
from cdnpurge.errors import PurgeRequestError
from cdnpurge.observability.metrics import get_metrics
from cdnpurge.utils import assert_required_properties, chunked, next_request_id, process_queue

if TYPE_CHECKING:
    from cdnpurge.context import PurgeContext
    from cdnpurge.models import CdnConfig

CLOUDFLARE_PURGE_URL = "https://api.cloudflare.com/client/v4/zones/{zone_id}/purge_cache"


def _api_succeeded(resp: httpx.Response) -> bool:
    try:
        return orjson.loads(resp.content).get("success") is True
    except (orjson.JSONDecodeError, AttributeError):
        return False


class CloudflarePurgeClient:
    name = "cloudflare"
    batch_size = 30

    def __init__(self, http: httpx.AsyncClient) -> None:
        self.http = http

    def validate(self, config: CdnConfig) -> None:
        assert_required_properties(config, INVALID_PURGE_CONFIG, "host", "zoneId", "apiToken")

    def supports_purge_by_key(self) -> bool:
        return True

    async def purge(
        self, ctx: PurgeContext, config: CdnConfig, keys: Sequence[str] | None
    ) -> None:
        if not keys:
            return

        site_id = ctx.site_id
        host = config.host
        url = CLOUDFLARE_PURGE_URL.format(zone_id=config.zone_id)
        headers = {
            "content-type": "application/json",
            "Authorization": f"Bearer {config.api_token}",
        }
        metrics = get_metrics()

        async def send(batch: list[str]) -> None:
            body = orjson.dumps({"tags": batch})
            request_id = next_request_id(ctx)
            ctx.log.info(
                f"{site_id} [{request_id}] [cloudflare] purging '{host}' with {body.decode()}"
            )
            with metrics.track_request(self.name, len(batch)):
                try:
                    resp = await self.http.post(url, headers=headers, content=body)
                except httpx.HTTPError as e:
                    msg = f"{site_id} [{request_id}] [cloudflare] {host} purge failed: {e!r}"
                    ctx.log.error(msg)
                    raise PurgeRequestError(msg, provider=self.name) from e

                if not resp.is_success or not _api_succeeded(resp):
                    cf_ray = resp.headers.get("cf-ray")
                    msg = (
                        f"{site_id} [{request_id}] [cloudflare] {host} purge failed: "
                        f"{resp.status_code} - {resp.text} - cf-ray: {cf_ray}"
                    )
                    ctx.log.error(msg)
                    ctx.log.error(
                        f"{site_id} [{request_id}] [cloudflare] {host} purge body was: "
                        f"{body.decode()}"
                    )
                    raise PurgeRequestError(
                        msg, provider=self.name, status=resp.status_code, cf_ray=cf_ray
                    )

            ctx.log.info(
                f"{site_id} [{request_id}] [cloudflare] {host} purge of {len(batch)} tag(s) "
                f"succeeded: {resp.text}"
            )

        await process_queue(
            chunked(keys, self.batch_size), send, concurrency=settings.purge_concurrency
        )
