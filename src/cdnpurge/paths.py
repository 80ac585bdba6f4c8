"""Product page path resolution from a site's public route patterns.

``public.patterns`` maps route patterns to override dicts, e.g.::

    {
        "base": {"storeCode": "us", "storeViewCode": "en"},
        "/products/{{urlKey}}": {"pageType": "product"},
    }

The ``base`` entry holds defaults merged under every pattern. A pattern
renders a product page when its merged overrides declare
``pageType == "product"`` and any store codes it declares match the
product's own.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from cdnpurge.models import ProductRef, PublicSection

PLACEHOLDER_RE = re.compile(r"\{\{([^}]+)\}\}")
PRODUCT_PAGE_TYPE = "product"


def slugify(value: str) -> str:
    """Lower-case ``value`` and collapse non-alphanumeric runs into dashes."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def _placeholder_values(product: ProductRef) -> dict[str, str | None]:
    return {
        "urlKey": product.url_key,
        "sku": slugify(product.sku) if product.sku else None,
        "storeCode": product.store_code,
        "storeViewCode": product.store_view_code,
    }


def _matches_store(overrides: Mapping[str, Any], product: ProductRef) -> bool:
    store_code = overrides.get("storeCode")
    if store_code and product.store_code and store_code != product.store_code:
        return False
    store_view_code = overrides.get("storeViewCode")
    if store_view_code and product.store_view_code and store_view_code != product.store_view_code:
        return False
    return True


def render_pattern(pattern: str, values: Mapping[str, str | None]) -> str | None:
    """Substitute ``{{name}}`` placeholders, or None if one has no value."""
    if "*" in pattern:
        return None
    missing = False

    def replace(match: re.Match[str]) -> str:
        nonlocal missing
        value = values.get(match.group(1).strip())
        if not value:
            missing = True
            return ""
        return value

    rendered = PLACEHOLDER_RE.sub(replace, pattern)
    return None if missing else rendered


def resolve_product_path(
    public_config: PublicSection | Mapping[str, Any] | None,
    product: ProductRef | Mapping[str, Any],
) -> str | None:
    """Compute the concrete page path of ``product``, if the site routes one."""
    if public_config is None:
        return None
    if not isinstance(public_config, PublicSection):
        public_config = PublicSection.model_validate(public_config)
    if not isinstance(product, ProductRef):
        product = ProductRef.model_validate(product)

    patterns = public_config.patterns
    base = patterns.get("base", {})
    values = _placeholder_values(product)

    for pattern, overrides in patterns.items():
        if pattern == "base":
            continue
        merged = {**base, **(overrides or {})}
        if merged.get("pageType") != PRODUCT_PAGE_TYPE:
            continue
        if not _matches_store(merged, product):
            continue
        path = render_pattern(pattern, values)
        if path:
            return path
    return None
