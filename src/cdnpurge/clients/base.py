"""Capability interface shared by all CDN purge clients.

Clients are a closed set selected by ``cdn.prod.type``; they share no base
class, only this protocol. Each one receives the HTTP client it sends
through, so tests can substitute an ``httpx.MockTransport``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    import httpx

    from cdnpurge.context import PurgeContext
    from cdnpurge.models import CdnConfig

INVALID_PURGE_CONFIG = "invalid purge config"


class PurgeClient(Protocol):
    """Purge client for one CDN provider."""

    name: str
    batch_size: int

    def __init__(self, http: httpx.AsyncClient) -> None: ...

    def validate(self, config: CdnConfig) -> None:
        """Raise PurgeConfigError naming the first missing required property."""
        ...

    def supports_purge_by_key(self) -> bool: ...

    async def purge(
        self, ctx: PurgeContext, config: CdnConfig, keys: Sequence[str] | None
    ) -> None:
        """Evict ``keys``, one HTTP call per batch; no-op for no keys."""
        ...
