"""CDN cache invalidation for catalog changes.

Computes the surrogate keys of changed products and evicts them from the
site's production CDN (Fastly, Cloudflare, Akamai or the managed purge
proxy) in provider-sized batches.
"""

from cdnpurge.context import ContextAttributes, PurgeContext, RequestInfo
from cdnpurge.errors import (
    PurgeConfigError,
    PurgeError,
    PurgeRequestError,
    UnsupportedCdnTypeError,
)
from cdnpurge.purge import purge, purge_batch, purge_path

__version__ = "0.1.0"

__all__ = [
    "ContextAttributes",
    "PurgeConfigError",
    "PurgeContext",
    "PurgeError",
    "PurgeRequestError",
    "RequestInfo",
    "UnsupportedCdnTypeError",
    "purge",
    "purge_batch",
    "purge_path",
]
