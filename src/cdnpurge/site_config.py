"""Site configuration lookup.

The purge layer only consumes the cached site configuration; where it comes
from is up to the host application. ``FileSiteConfigResolver`` serves the
standalone app and the CLI from a directory of JSON documents:
    {base_path}/{org}--{site}.json
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]
import orjson
from pydantic import ValidationError

from cdnpurge.models import HelixConfig

logger = logging.getLogger(__name__)


class SiteConfigResolver(Protocol):
    """Supplies the configuration (CDN credentials, content bus, routes) of a site."""

    async def fetch(self, org: str, site: str) -> HelixConfig | None: ...


class FileSiteConfigResolver:
    """Reads site configurations from JSON files."""

    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path)

    def _config_path(self, org: str, site: str) -> Path:
        return self.base_path / f"{org}--{site}.json"

    async def fetch(self, org: str, site: str) -> HelixConfig | None:
        """Load and parse the configuration of ``org/site``.

        Returns None for unknown sites and for documents that are not a JSON
        object, logging a warning for the latter.
        """
        path = self._config_path(org, site)
        if not await aiofiles.os.path.exists(path):
            return None

        async with aiofiles.open(path, "rb") as f:
            raw = await f.read()

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            logger.warning(f"invalid config for {org}--{site}: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"invalid config for {org}--{site}: not an object")
            return None

        try:
            return HelixConfig.model_validate(data)
        except ValidationError as e:
            logger.warning(f"invalid config for {org}--{site}: {e}")
            return None
