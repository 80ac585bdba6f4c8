"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path

import orjson
import typer
from pydantic import ValidationError

from cdnpurge.models import HelixConfig


def load_helix_config(path: Path) -> HelixConfig:
    """Read a site configuration file, exiting with code 2 if it is invalid."""
    try:
        return HelixConfig.model_validate(orjson.loads(path.read_bytes()))
    except (orjson.JSONDecodeError, ValidationError) as e:
        typer.echo(f"Invalid site configuration {path}: {e}", err=True)
        raise typer.Exit(code=2)
