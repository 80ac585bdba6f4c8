"""Purge orchestration for changed catalog entities.

``purge`` and ``purge_path`` handle a single entity, ``purge_batch`` merges
the keys of many entities into one deduplicated set so the CDN is contacted
with the minimum number of requests its batch limit allows.

Missing or partial CDN configuration skips the purge with a warning so the
write path that triggered it is never broken by it. An unknown CDN type and
provider failures are raised to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from pydantic import ValidationError

from cdnpurge.clients import create_purge_client
from cdnpurge.errors import PurgeConfigError
from cdnpurge.keys import (
    KeySet,
    compute_authored_content_key,
    compute_product_path_key,
    compute_product_sku_key,
    compute_product_url_key_key,
)
from cdnpurge.models import ProductRef
from cdnpurge.paths import resolve_product_path

if TYPE_CHECKING:
    from cdnpurge.clients.base import PurgeClient
    from cdnpurge.context import PurgeContext, RequestInfo
    from cdnpurge.models import CdnConfig, HelixConfig

NO_CDN_CONFIG = "No production CDN configuration found, skipping purge"
NO_CDN_CONFIG_BATCH = "No production CDN configuration found, skipping batch purge"
NO_KEYS = "No keys to purge, skipping purge"
NO_KEYS_BATCH = "No keys to purge in batch, skipping purge"


@dataclass
class ResolvedPurge:
    """Validated production CDN setup for one purge operation."""

    helix_config: HelixConfig
    cdn_config: CdnConfig
    client: PurgeClient


def resolve_production_cdn(ctx: PurgeContext, missing_message: str) -> ResolvedPurge | None:
    """Select and validate the production purge client.

    Returns None (after logging a warning) when there is nothing to purge
    against: no cached configuration, a configuration that does not
    parse, no ``cdn.prod`` section, or one missing required credentials.

    Raises:
        UnsupportedCdnTypeError: If ``cdn.prod.type`` is unknown
    """
    try:
        helix_config = ctx.helix_config
    except ValidationError as e:
        ctx.log.warning(f"ignoring invalid site configuration: {e}")
        return None
    cdn_config = helix_config.cdn_prod if helix_config else None
    if helix_config is None or cdn_config is None:
        ctx.log.warning(missing_message)
        return None

    client = create_purge_client(cdn_config.type, ctx.http)
    try:
        client.validate(cdn_config)
    except PurgeConfigError as e:
        # customers may deliberately configure their setup only partially
        ctx.log.warning(f'ignoring production cdn purge config for type "{cdn_config.type}": {e}')
        return None

    return ResolvedPurge(helix_config=helix_config, cdn_config=cdn_config, client=client)


def product_keys(
    helix_config: HelixConfig, org: str, site: str, product: ProductRef
) -> list[str]:
    """Up to three keys for one product: sku, urlKey and authored content."""
    keys: list[str] = []
    if product.sku:
        keys.append(
            compute_product_sku_key(
                org, site, product.store_code, product.store_view_code, product.sku
            )
        )
    if product.url_key:
        keys.append(
            compute_product_url_key_key(
                org, site, product.store_code, product.store_view_code, product.url_key
            )
        )

    content_bus_id = helix_config.content_bus_id
    if content_bus_id:
        path = product.path or resolve_product_path(helix_config.public, product)
        if path:
            keys.append(compute_authored_content_key(content_bus_id, path))
    return keys


async def purge(ctx: PurgeContext, sku: str | None, url_key: str | None) -> None:
    """Purge the cached representations of one product of the current site.

    Example:
        await purge(ctx, "PROD-123", "awesome-product")
        await purge(ctx, "PROD-123", None)
    """
    resolved = resolve_production_cdn(ctx, NO_CDN_CONFIG)
    if resolved is None:
        return

    info = ctx.config
    product = ProductRef(
        sku=sku,
        url_key=url_key,
        store_code=info.store_code,
        store_view_code=info.store_view_code,
    )
    keys = product_keys(resolved.helix_config, info.org, info.site, product)

    if not keys:
        ctx.log.warning(NO_KEYS)
        return

    await resolved.client.purge(ctx, resolved.cdn_config, keys)


async def purge_path(ctx: PurgeContext, request_info: RequestInfo, path: str | None) -> None:
    """Purge the cached representations of the product page at ``path``."""
    resolved = resolve_production_cdn(ctx, NO_CDN_CONFIG)
    if resolved is None:
        return

    keys = KeySet()
    if path:
        keys.add(
            compute_product_path_key(
                request_info.org,
                request_info.site,
                request_info.store_code,
                request_info.store_view_code,
                path,
            )
        )
        content_bus_id = resolved.helix_config.content_bus_id
        if content_bus_id:
            keys.add(compute_authored_content_key(content_bus_id, path))

    if not keys:
        ctx.log.warning(NO_KEYS)
        return

    await resolved.client.purge(ctx, resolved.cdn_config, keys.to_list())


async def purge_batch(
    ctx: PurgeContext,
    request_info: RequestInfo,
    products: Iterable[ProductRef | Mapping[str, Any]],
) -> None:
    """Purge many products with a single client call.

    Keys of all products are merged into one insertion-ordered set, so
    products sharing identifiers contribute each key once.
    """
    resolved = resolve_production_cdn(ctx, NO_CDN_CONFIG_BATCH)
    if resolved is None:
        return

    refs = [p if isinstance(p, ProductRef) else ProductRef.model_validate(p) for p in products]

    keys = KeySet()
    for product in refs:
        keys.update(
            product_keys(resolved.helix_config, request_info.org, request_info.site, product)
        )

    if not keys:
        ctx.log.warning(NO_KEYS_BATCH)
        return

    ctx.log.info(f"Purging {len(keys)} unique cache keys for {len(refs)} products")
    await resolved.client.purge(ctx, resolved.cdn_config, keys.to_list())
