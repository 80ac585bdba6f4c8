"""Cache key schema for product purges.

Every cached product representation is tagged by the delivery tier with
opaque surrogate keys. A key is the first 16 characters of the unpadded
Base64URL SHA-256 digest of a stable identifying string:

- sku key:      {org}--{site}/{storeCode}/{storeViewCode}/sku/{sku}
- urlKey key:   {org}--{site}/{storeCode}/{storeViewCode}/urlkey/{urlKey}
- path key:     {org}--{site}/{storeCode}/{storeViewCode}/path/{path}
- content key:  {contentBusId}{path}

Beyond string identity nothing here is interpreted by the purge layer.
"""

from __future__ import annotations

import base64
import hashlib
from typing import Iterable, Iterator

SURROGATE_KEY_LENGTH = 16


def compute_surrogate_key(value: str) -> str:
    """Hash an identifying string into a surrogate key."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    encoded = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    return encoded[:SURROGATE_KEY_LENGTH]


def _scope(org: str, site: str, store_code: str | None, store_view_code: str | None) -> str:
    return f"{org}--{site}/{store_code}/{store_view_code}"


def compute_product_sku_key(
    org: str, site: str, store_code: str | None, store_view_code: str | None, sku: str
) -> str:
    return compute_surrogate_key(f"{_scope(org, site, store_code, store_view_code)}/sku/{sku}")


def compute_product_url_key_key(
    org: str, site: str, store_code: str | None, store_view_code: str | None, url_key: str
) -> str:
    return compute_surrogate_key(
        f"{_scope(org, site, store_code, store_view_code)}/urlkey/{url_key}"
    )


def compute_product_path_key(
    org: str, site: str, store_code: str | None, store_view_code: str | None, path: str
) -> str:
    return compute_surrogate_key(f"{_scope(org, site, store_code, store_view_code)}/path/{path}")


def compute_authored_content_key(content_bus_id: str, path: str) -> str:
    """Key of the authored (non-product) content rendered at ``path``."""
    return compute_surrogate_key(f"{content_bus_id}{path}")


class KeySet:
    """Insertion-ordered collection of cache keys without duplicates."""

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._keys: dict[str, None] = {}
        self.update(keys)

    def add(self, key: str | None) -> None:
        """Add a key, ignoring empty values and duplicates."""
        if key:
            self._keys.setdefault(key, None)

    def update(self, keys: Iterable[str | None]) -> None:
        for key in keys:
            self.add(key)

    def to_list(self) -> list[str]:
        return list(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __repr__(self) -> str:
        return f"KeySet({self.to_list()!r})"
