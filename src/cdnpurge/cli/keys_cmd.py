"""CLI command for computing the cache keys of a product.

Usage:
    cdnpurge keys --org myorg --site mysite --store-code us --store-view-code en --sku PROD-123
    cdnpurge keys ... --url-key my-product --config site.json
"""

from __future__ import annotations

from pathlib import Path

import typer


def keys(
    org: str = typer.Option(..., "--org", help="Organization"),
    site: str = typer.Option(..., "--site", help="Site"),
    store_code: str = typer.Option(..., "--store-code", help="Store code"),
    store_view_code: str = typer.Option(..., "--store-view-code", help="Store view code"),
    sku: str | None = typer.Option(None, "--sku", help="Product SKU"),
    url_key: str | None = typer.Option(None, "--url-key", help="Product URL key"),
    path: str | None = typer.Option(None, "--path", help="Product page path"),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Site configuration JSON (enables authored content keys)",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Print one cache key per line."""
    from cdnpurge.cli.common import load_helix_config
    from cdnpurge.models import HelixConfig, ProductRef
    from cdnpurge.purge import product_keys

    helix_config = load_helix_config(config) if config else HelixConfig()
    product = ProductRef(
        sku=sku,
        url_key=url_key,
        store_code=store_code,
        store_view_code=store_view_code,
        path=path,
    )

    computed = product_keys(helix_config, org, site, product)
    if not computed:
        typer.echo("No keys for the given product", err=True)
        raise typer.Exit(code=1)

    for key in computed:
        typer.echo(key)
