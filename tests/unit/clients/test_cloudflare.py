"""Tests for the Cloudflare purge client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

import httpx
import pytest

from cdnpurge.clients.cloudflare import CloudflarePurgeClient
from cdnpurge.config import settings
from cdnpurge.errors import PurgeConfigError, PurgeRequestError
from cdnpurge.models import CdnConfig

if TYPE_CHECKING:
    from conftest import RequestRecorder

    from cdnpurge.context import PurgeContext

CLOUDFLARE_CONFIG = CdnConfig(
    type="cloudflare", host="www.example.com", zoneId="zone-1", apiToken="cf-token"
)


class TestCloudflareValidation:
    """Tests for Cloudflare configuration validation."""

    @pytest.mark.parametrize(
        ("config", "missing"),
        [
            (CdnConfig(type="cloudflare", zoneId="z", apiToken="t"), "host"),
            (CdnConfig(type="cloudflare", host="h", apiToken="t"), "zoneId"),
            (CdnConfig(type="cloudflare", host="h", zoneId="z"), "apiToken"),
        ],
    )
    def test_first_missing_field_is_named(self, config: CdnConfig, missing: str) -> None:
        """Validation names the missing property."""
        with pytest.raises(PurgeConfigError, match=f'"{missing}" is required'):
            CloudflarePurgeClient(httpx.AsyncClient()).validate(config)


class TestCloudflarePurge:
    """Tests for Cloudflare cache-tag purges."""

    @pytest.mark.asyncio
    async def test_request_shape(
        self, recorder: RequestRecorder, make_context: Callable[..., PurgeContext]
    ) -> None:
        """Tags are posted with a bearer token to the zone purge endpoint."""
        ctx = make_context()
        await CloudflarePurgeClient(ctx.http).purge(ctx, CLOUDFLARE_CONFIG, ["a", "b"])

        request = recorder.requests[0]
        assert str(request.url) == (
            "https://api.cloudflare.com/client/v4/zones/zone-1/purge_cache"
        )
        assert request.headers["authorization"] == "Bearer cf-token"
        assert recorder.json_bodies() == [{"tags": ["a", "b"]}]

    @pytest.mark.asyncio
    async def test_batches_of_30(
        self, recorder: RequestRecorder, make_context: Callable[..., PurgeContext]
    ) -> None:
        """65 tags are split into 30 + 30 + 5 and every tag is sent once."""
        ctx = make_context()
        keys = [f"tag-{i}" for i in range(65)]

        await CloudflarePurgeClient(ctx.http).purge(ctx, CLOUDFLARE_CONFIG, keys)

        bodies = recorder.json_bodies()
        assert sorted(len(b["tags"]) for b in bodies) == [5, 30, 30]
        assert sorted(tag for b in bodies for tag in b["tags"]) == sorted(keys)
        assert ctx.attributes.sub_request_id == 3

    @pytest.mark.asyncio
    async def test_batches_with_concurrency_one(
        self,
        recorder: RequestRecorder,
        make_context: Callable[..., PurgeContext],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """With a single worker batches are sent in order."""
        monkeypatch.setattr(settings, "purge_concurrency", 1)
        ctx = make_context()
        keys = [f"tag-{i}" for i in range(65)]

        await CloudflarePurgeClient(ctx.http).purge(ctx, CLOUDFLARE_CONFIG, keys)

        assert [b["tags"] for b in recorder.json_bodies()] == [keys[:30], keys[30:60], keys[60:]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("keys", [[], None])
    async def test_no_keys_no_request(
        self,
        keys: list[str] | None,
        recorder: RequestRecorder,
        make_context: Callable[..., PurgeContext],
    ) -> None:
        """Empty or missing keys make no HTTP call."""
        ctx = make_context()
        await CloudflarePurgeClient(ctx.http).purge(ctx, CLOUDFLARE_CONFIG, keys)

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_unsuccessful_200_raises(
        self,
        recorder: RequestRecorder,
        make_context: Callable[..., PurgeContext],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A 200 answer with success=false is a failure carrying the cf-ray id."""
        recorder.responder = lambda request: httpx.Response(
            200,
            json={"success": False, "errors": [{"code": 1134, "message": "quota"}]},
            headers={"cf-ray": "8a1b2c3d4e-FRA"},
        )
        ctx = make_context()

        with pytest.raises(PurgeRequestError) as exc_info:
            await CloudflarePurgeClient(ctx.http).purge(ctx, CLOUDFLARE_CONFIG, ["a"])

        assert "purge failed" in str(exc_info.value)
        assert "cf-ray: 8a1b2c3d4e-FRA" in str(exc_info.value)
        assert exc_info.value.cf_ray == "8a1b2c3d4e-FRA"
        assert exc_info.value.status == 200

        errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
        assert any("purge body was: " in m and '"tags":["a"]' in m for m in errors)

    @pytest.mark.asyncio
    async def test_error_status_raises(
        self, recorder: RequestRecorder, make_context: Callable[..., PurgeContext]
    ) -> None:
        """Non-2xx answers raise with the status code."""
        recorder.responder = lambda request: httpx.Response(
            401, json={"success": False}, headers={"cf-ray": "ray-1"}
        )
        ctx = make_context()

        with pytest.raises(PurgeRequestError) as exc_info:
            await CloudflarePurgeClient(ctx.http).purge(ctx, CLOUDFLARE_CONFIG, ["a"])

        assert exc_info.value.status == 401
        assert exc_info.value.provider == "cloudflare"

    @pytest.mark.asyncio
    async def test_unparseable_body_is_failure(
        self, recorder: RequestRecorder, make_context: Callable[..., PurgeContext]
    ) -> None:
        """A 200 answer without a JSON body is not taken as success."""
        recorder.responder = lambda request: httpx.Response(200, text="<html>")
        ctx = make_context()

        with pytest.raises(PurgeRequestError, match="purge failed: 200 - <html>"):
            await CloudflarePurgeClient(ctx.http).purge(ctx, CLOUDFLARE_CONFIG, ["a"])

    @pytest.mark.asyncio
    async def test_failure_stops_remaining_batches(
        self,
        recorder: RequestRecorder,
        make_context: Callable[..., PurgeContext],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """After a failed batch no further batches are started."""
        monkeypatch.setattr(settings, "purge_concurrency", 1)
        recorder.responder = lambda request: httpx.Response(500, text="error")
        ctx = make_context()

        with pytest.raises(PurgeRequestError):
            await CloudflarePurgeClient(ctx.http).purge(
                ctx, CLOUDFLARE_CONFIG, [f"t{i}" for i in range(90)]
            )

        assert len(recorder.requests) == 1
