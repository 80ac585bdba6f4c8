"""Bulk cache purge endpoint.

POST /{org}/{site}/cache purges many products of one site, across store
codes and store views, with a single batched CDN operation.

Example:
    POST /myorg/mysite/cache
    x-cache-api-key: Bearer <CACHE_API_KEY>
    Content-Type: application/json

    {
      "products": [
        {"sku": "PROD-123", "urlKey": "product-123", "storeCode": "us", "storeViewCode": "en"},
        {"sku": "PROD-456", "storeCode": "us", "storeViewCode": "en"}
      ]
    }
"""

from __future__ import annotations

import hmac
import logging
from typing import Any
from uuid import uuid4

import httpx
import orjson
from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError

from cdnpurge.api.deps import get_http_client, get_site_config_resolver
from cdnpurge.api.errors import error_response
from cdnpurge.config import settings
from cdnpurge.context import ContextAttributes, PurgeContext, RequestInfo
from cdnpurge.errors import PurgeError
from cdnpurge.models import ProductRef
from cdnpurge.observability.logging import LogContext
from cdnpurge.purge import purge_batch
from cdnpurge.site_config import SiteConfigResolver

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cache"])

CACHE_API_KEY_HEADER = "x-cache-api-key"

REQUIRED_PRODUCT_FIELDS = ("sku", "storeCode", "storeViewCode")


def validate_cache_api_key(header_value: str | None) -> bool:
    """Check the cache API key, accepting ``Bearer <token>`` or the bare token."""
    if not settings.cache_api_key:
        logger.warning("CACHE_API_KEY not configured")
        return False

    if not header_value:
        return False

    token = header_value.removeprefix("Bearer ")
    return hmac.compare_digest(token.encode("utf-8"), settings.cache_api_key.encode("utf-8"))


def _validate_products(data: Any) -> str | None:
    """Return the first problem with the request body, or None if valid."""
    products = data.get("products") if isinstance(data, dict) else None
    if not isinstance(products, list):
        return 'request body must contain a "products" array'
    if not products:
        return "products array cannot be empty"
    for product in products:
        for name in REQUIRED_PRODUCT_FIELDS:
            if not isinstance(product, dict) or not product.get(name):
                return f'each product must have a "{name}" property'
    return None


@router.post("/{org}/{site}/cache")
async def bulk_purge(
    org: str,
    site: str,
    request: Request,
    resolver: SiteConfigResolver = Depends(get_site_config_resolver),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    """Purge the CDN cache for a list of products of one site."""
    if not validate_cache_api_key(request.headers.get(CACHE_API_KEY_HEADER)):
        logger.warning("Invalid or missing cache API key")
        return error_response(401, "unauthorized")

    try:
        data = orjson.loads(await request.body())
    except orjson.JSONDecodeError:
        data = None

    problem = _validate_products(data)
    if problem:
        return error_response(400, problem)
    try:
        products = [ProductRef.model_validate(p) for p in data["products"]]
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        return error_response(400, f'invalid product property "{field}": {error["msg"]}')

    # fetched once for the entire request
    helix_config = await resolver.fetch(org, site)
    if helix_config is None:
        logger.warning(f"No helix config found for {org}/{site}")
        return error_response(404, "site configuration not found")

    info = RequestInfo(org=org, site=site)
    ctx = PurgeContext(
        config=info,
        http=http,
        attributes=ContextAttributes(helix_config_cache=helix_config),
    )

    request_id = request.headers.get("x-request-id") or uuid4().hex
    with LogContext(request_id=request_id, site_id=info.site_key):
        try:
            await purge_batch(ctx, info, products)
        except PurgeError as e:
            logger.error(f"Failed to purge cache for batch: {e}")
            return error_response(500, f"cache purge failed: {e}")

        logger.info(f"Cache purge completed: {len(products)} products purged successfully")

    return Response(status_code=200)
