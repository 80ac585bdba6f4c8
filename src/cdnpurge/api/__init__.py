"""HTTP API for the purge service."""

from cdnpurge.api.app import create_app

__all__ = ["create_app"]
