"""CLI commands for cdnpurge.

Provides command-line interface using Typer:
- cdnpurge keys: Print the cache keys of a product
- cdnpurge purge: Purge explicit keys through a site's production CDN
- cdnpurge serve: Run the API server

Usage:
    cdnpurge --help
    cdnpurge keys --org o --site s --store-code us --store-view-code en --sku PROD-1
    cdnpurge purge --config site.json --org o --site s KEY1 KEY2
    cdnpurge serve --port 8080
"""

import typer

from cdnpurge.cli.keys_cmd import keys
from cdnpurge.cli.purge_cmd import purge
from cdnpurge.cli.serve import app as serve_app

app = typer.Typer(
    name="cdnpurge",
    help="CDN cache invalidation for catalog changes",
    no_args_is_help=True,
)

app.command(name="keys", help="Print the cache keys a product purge would evict")(keys)
app.command(name="purge", help="Purge cache keys through the site's production CDN")(purge)
app.add_typer(serve_app, name="serve")


@app.callback()
def callback() -> None:
    """CDN cache invalidation for catalog changes."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
