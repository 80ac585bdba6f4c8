from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CDNPURGE_", env_file=".env", extra="ignore")

    app_name: str = "cdn-purge"
    env: str = "dev"
    host: str = "0.0.0.0"  # nosec B104 - intentional for container deployments
    port: int = 8080

    # Outbound HTTP
    http_timeout: float = Field(default=30.0, validation_alias="HTTP_TIMEOUT")
    # EdgeGrid signing adds overhead, Akamai calls get their own bound
    akamai_timeout: float = Field(default=10.0, validation_alias="AKAMAI_TIMEOUT")
    purge_concurrency: int = Field(default=8, validation_alias="PURGE_CONCURRENCY")

    # Credentials not embedded in the cached site configuration
    cache_api_key: str | None = Field(default=None, validation_alias="CACHE_API_KEY")
    managed_purge_proxy_token: str | None = Field(
        default=None, validation_alias="HLX_ADMIN_MANAGED_PURGEPROXY_TOKEN"
    )

    # Site configurations for the standalone app and the CLI
    site_config_dir: str = Field(
        default="/etc/cdnpurge/sites", validation_alias="SITE_CONFIG_DIR"
    )

    # Observability
    enable_metrics: bool = Field(default=True, validation_alias="ENABLE_METRICS")
    log_level: str = "INFO"
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")


settings = Settings()
