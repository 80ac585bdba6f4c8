"""Site configuration and purge request models.

The cached site configuration arrives as JSON with camelCase names. Models
accept both the JSON names and the snake_case attribute names and ignore
sections this package does not consume.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ConfigModel(BaseModel):
    """Base model for externally supplied configuration."""

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
        "frozen": True,
    }


class CdnConfig(ConfigModel):
    """Production CDN configuration (``cdn.prod``).

    ``type`` stays a plain string: mapping it to a purge client, and
    rejecting unknown values, happens at dispatch time.
    """

    type: str | None = None
    host: str | None = None

    # Fastly
    service_id: str | None = Field(default=None, alias="serviceId")
    auth_token: str | None = Field(default=None, alias="authToken")

    # Cloudflare
    zone_id: str | None = Field(default=None, alias="zoneId")
    api_token: str | None = Field(default=None, alias="apiToken")

    # Akamai EdgeGrid
    endpoint: str | None = None
    client_secret: str | None = Field(default=None, alias="clientSecret")
    client_token: str | None = Field(default=None, alias="clientToken")
    access_token: str | None = Field(default=None, alias="accessToken")

    # Managed (purge proxy)
    env_id: str | None = Field(default=None, alias="envId")


class CdnSection(ConfigModel):
    prod: CdnConfig | None = None


class ContentSection(ConfigModel):
    content_bus_id: str | None = Field(default=None, alias="contentBusId")


class PublicSection(ConfigModel):
    patterns: dict[str, dict[str, Any]] = Field(default_factory=dict)


class HelixConfig(ConfigModel):
    """Cached site configuration consumed by the purge dispatcher."""

    cdn: CdnSection | None = None
    content: ContentSection | None = None
    public: PublicSection | None = None

    @property
    def cdn_prod(self) -> CdnConfig | None:
        return self.cdn.prod if self.cdn else None

    @property
    def content_bus_id(self) -> str | None:
        return self.content.content_bus_id if self.content else None


class ProductRef(ConfigModel):
    """Identifying tuple of one changed catalog entity."""

    # catalogs may send numeric skus and store codes
    model_config = {"coerce_numbers_to_str": True}

    sku: str | None = None
    url_key: str | None = Field(default=None, alias="urlKey")
    store_code: str | None = Field(default=None, alias="storeCode")
    store_view_code: str | None = Field(default=None, alias="storeViewCode")
    path: str | None = None
