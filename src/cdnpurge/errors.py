"""Exception hierarchy for CDN purge operations.

Configuration problems are split from provider failures so the dispatcher
can skip a purge on the former while letting the latter propagate:

- PurgeConfigError: a required credential field is missing (non-fatal)
- UnsupportedCdnTypeError: unknown ``cdn.prod.type`` (fatal, raised before I/O)
- PurgeRequestError: provider API or transport failure (fatal for the call)
"""

from __future__ import annotations


class PurgeError(Exception):
    """Base class for all purge errors."""


class PurgeConfigError(PurgeError):
    """A provider configuration is missing a required property."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class UnsupportedCdnTypeError(PurgeError):
    """The configured CDN type has no purge client."""

    def __init__(self, cdn_type: str | None):
        super().__init__(f"Unsupported 'cdn.prod.type' value: {cdn_type}")
        self.cdn_type = cdn_type


class PurgeRequestError(PurgeError):
    """A purge request was rejected by the provider or never reached it."""

    def __init__(
        self,
        message: str,
        provider: str,
        status: int | None = None,
        cf_ray: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status = status
        self.cf_ray = cf_ray
