"""Fastly purge client using the bulk surrogate-key API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import httpx
import orjson

from cdnpurge.clients.base import INVALID_PURGE_CONFIG
from cdnpurge.errors import PurgeRequestError
from cdnpurge.observability.metrics import get_metrics
from cdnpurge.utils import assert_required_properties, chunked, next_request_id

if TYPE_CHECKING:
    from cdnpurge.context import PurgeContext
    from cdnpurge.models import CdnConfig

FASTLY_PURGE_URL = "https://api.fastly.com/service/{service_id}/purge"


class FastlyPurgeClient:
    """Purges Fastly by surrogate key.

    Batches are sent sequentially; the first failing batch aborts the purge.
    """

    name = "fastly"
    # https://developer.fastly.com/reference/api/purging/#bulk-purge-tag
    batch_size = 256

    def __init__(self, http: httpx.AsyncClient) -> None:
        self.http = http

    def validate(self, config: CdnConfig) -> None:
        assert_required_properties(config, INVALID_PURGE_CONFIG, "host", "serviceId", "authToken")

    def supports_purge_by_key(self) -> bool:
        return True

    async def purge(
        self, ctx: PurgeContext, config: CdnConfig, keys: Sequence[str] | None
    ) -> None:
        if not keys:
            return

        site_id = ctx.site_id
        host = config.host
        url = FASTLY_PURGE_URL.format(service_id=config.service_id)
        headers = {
            "content-type": "application/json",
            "accept": "application/json",
            "fastly-key": config.auth_token or "",
        }
        metrics = get_metrics()

        for batch in chunked(keys, self.batch_size):
            request_id = next_request_id(ctx)
            ctx.log.info(
                f"{site_id} [{request_id}] [fastly] {host} purging keys '{','.join(batch)}'"
            )
            with metrics.track_request(self.name, len(batch)):
                try:
                    resp = await self.http.post(
                        url,
                        headers=headers,
                        content=orjson.dumps({"surrogate_keys": batch}),
                    )
                except httpx.HTTPError as e:
                    msg = (
                        f"{site_id} [{request_id}] [fastly] {host} purging {len(batch)} "
                        f"surrogate key(s) failed: {e!r}"
                    )
                    ctx.log.error(msg)
                    raise PurgeRequestError(msg, provider=self.name) from e

                if not resp.is_success:
                    msg = (
                        f"{site_id} [{request_id}] [fastly] {host} purging {len(batch)} "
                        f"surrogate key(s) failed: {resp.status_code} - {resp.text}"
                    )
                    ctx.log.error(msg)
                    raise PurgeRequestError(msg, provider=self.name, status=resp.status_code)

            ctx.log.info(
                f"{site_id} [{request_id}] [fastly] {host} purging {len(batch)} "
                f"surrogate key(s) succeeded: {resp.status_code} - {resp.text}"
            )
