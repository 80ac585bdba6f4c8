"""CLI command for purging explicit cache keys.

Usage:
    cdnpurge purge --config site.json --org myorg --site mysite KEY [KEY ...]
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer


def purge(
    keys: list[str] = typer.Argument(..., help="Cache keys to purge"),
    config: Path = typer.Option(
        ...,
        "--config",
        "-c",
        help="Site configuration JSON with a cdn.prod section",
        exists=True,
        dir_okay=False,
    ),
    org: str = typer.Option(..., "--org", help="Organization"),
    site: str = typer.Option(..., "--site", help="Site"),
    store_code: str | None = typer.Option(None, "--store-code", help="Store code (log prefix)"),
    store_view_code: str | None = typer.Option(
        None, "--store-view-code", help="Store view code (log prefix)"
    ),
    log_level: str = typer.Option("info", "--log-level", "-l", help="Log level"),
) -> None:
    """Send the keys to the configured provider in batches."""
    from cdnpurge.cli.common import load_helix_config
    from cdnpurge.context import PurgeContext, RequestInfo
    from cdnpurge.errors import PurgeError
    from cdnpurge.keys import KeySet
    from cdnpurge.observability import configure_logging
    from cdnpurge.purge import NO_CDN_CONFIG, resolve_production_cdn

    configure_logging(json_format=False, level=log_level)
    helix_config = load_helix_config(config)
    info = RequestInfo(
        org=org, site=site, store_code=store_code, store_view_code=store_view_code
    )
    unique_keys = KeySet(keys).to_list()

    async def run() -> int | None:
        async with PurgeContext.open(info, helix_config) as ctx:
            resolved = resolve_production_cdn(ctx, NO_CDN_CONFIG)
            if resolved is None:
                return None
            await resolved.client.purge(ctx, resolved.cdn_config, unique_keys)
            return ctx.attributes.sub_request_id

    try:
        requests = asyncio.run(run())
    except PurgeError as e:
        typer.echo(f"Purge failed: {e}", err=True)
        raise typer.Exit(code=1)

    if requests is None:
        typer.echo("Nothing purged: no usable production CDN configuration", err=True)
        return
    typer.echo(f"Purged {len(unique_keys)} key(s) in {requests} request(s)")
