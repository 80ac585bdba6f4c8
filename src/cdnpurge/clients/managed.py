"""Purge client for the Adobe-managed CDN, reached through the purge proxy.

The proxy takes no body: keys travel space-separated in the
``Surrogate-Key`` header and the proxy token in ``x-aem-purge-key``. When the
configuration carries an ``envId`` it replaces ``host`` as the purge target.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import httpx

from cdnpurge.clients.base import INVALID_PURGE_CONFIG
from cdnpurge.errors import PurgeRequestError
from cdnpurge.observability.metrics import get_metrics
from cdnpurge.utils import assert_required_properties, chunked, next_request_id

if TYPE_CHECKING:
    from cdnpurge.context import PurgeContext
    from cdnpurge.models import CdnConfig

MANAGED_PURGE_URL = "https://purgeproxy.adobeaemcloud.com/purge/{target}"


class ManagedPurgeClient:
    name = "managed"
    batch_size = 256

    def __init__(self, http: httpx.AsyncClient) -> None:
        self.http = http

    def validate(self, config: CdnConfig) -> None:
        assert_required_properties(config, INVALID_PURGE_CONFIG, "host")

    def supports_purge_by_key(self) -> bool:
        return True

    async def purge(
        self, ctx: PurgeContext, config: CdnConfig, keys: Sequence[str] | None
    ) -> None:
        if not keys:
            return

        site_id = ctx.site_id
        target = config.env_id or config.host
        url = MANAGED_PURGE_URL.format(target=target)
        token = ctx.managed_purge_token or ""
        metrics = get_metrics()

        for batch in chunked(keys, self.batch_size):
            request_id = next_request_id(ctx)
            ctx.log.info(
                f"{site_id} [{request_id}] [managed] {target} purging keys '{','.join(batch)}'"
            )
            headers = {
                "accept": "application/json",
                "x-aem-purge-key": token,
                "Surrogate-Key": " ".join(batch),
            }
            with metrics.track_request(self.name, len(batch)):
                try:
                    resp = await self.http.post(url, headers=headers)
                except httpx.HTTPError as e:
                    msg = (
                        f"{site_id} [{request_id}] [managed] {target} purging {len(batch)} "
                        f"surrogate key(s) failed: {e!r}"
                    )
                    ctx.log.error(msg)
                    raise PurgeRequestError(msg, provider=self.name) from e

                if not resp.is_success:
                    msg = (
                        f"{site_id} [{request_id}] [managed] {target} purging {len(batch)} "
                        f"surrogate key(s) failed: {resp.status_code} - {resp.text}"
                    )
                    ctx.log.error(msg)
                    raise PurgeRequestError(msg, provider=self.name, status=resp.status_code)

            ctx.log.info(
                f"{site_id} [{request_id}] [managed] {target} purging {len(batch)} "
                f"surrogate key(s) succeeded: {resp.status_code} - {resp.text}"
            )
