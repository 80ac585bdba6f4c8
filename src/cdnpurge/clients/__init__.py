"""CDN purge clients.

One client per supported ``cdn.prod.type``:
- fastly: surrogate-key purge via the Fastly API
- cloudflare: cache-tag purge via the Cloudflare API
- akamai: Fast Purge with EdgeGrid authentication
- managed: Adobe-managed CDN through the purge proxy
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cdnpurge.clients.akamai import AkamaiPurgeClient
from cdnpurge.clients.base import PurgeClient
from cdnpurge.clients.cloudflare import CloudflarePurgeClient
from cdnpurge.clients.edgegrid import EdgeGridSigner
from cdnpurge.clients.fastly import FastlyPurgeClient
from cdnpurge.clients.managed import ManagedPurgeClient
from cdnpurge.errors import UnsupportedCdnTypeError

if TYPE_CHECKING:
    import httpx

PURGE_CLIENTS: dict[str, type[PurgeClient]] = {
    "fastly": FastlyPurgeClient,
    "akamai": AkamaiPurgeClient,
    "cloudflare": CloudflarePurgeClient,
    "managed": ManagedPurgeClient,
}


def create_purge_client(cdn_type: str | None, http: httpx.AsyncClient) -> PurgeClient:
    """Instantiate the client for ``cdn_type``.

    Raises:
        UnsupportedCdnTypeError: If no client handles ``cdn_type``
    """
    client_cls = PURGE_CLIENTS.get(cdn_type or "")
    if client_cls is None:
        raise UnsupportedCdnTypeError(cdn_type)
    return client_cls(http)


__all__ = [
    "PURGE_CLIENTS",
    "AkamaiPurgeClient",
    "CloudflarePurgeClient",
    "EdgeGridSigner",
    "FastlyPurgeClient",
    "ManagedPurgeClient",
    "PurgeClient",
    "create_purge_client",
]
