"""API routers for the purge service."""
