"""Global pytest configuration and fixtures.

Provides a recording HTTP transport so purge clients can be exercised
without reaching any CDN API.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

import httpx
import orjson
import pytest

from cdnpurge.context import ContextAttributes, PurgeContext, RequestInfo

Responder = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


def ok_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"status": "ok", "success": True})


class RequestRecorder:
    """Records outbound requests and answers them through ``responder``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responder: Responder = ok_response

    def __call__(self, request: httpx.Request) -> httpx.Response | Awaitable[httpx.Response]:
        self.requests.append(request)
        return self.responder(request)

    def json_bodies(self) -> list[Any]:
        return [orjson.loads(r.content) for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def recorder() -> RequestRecorder:
    return RequestRecorder()


@pytest.fixture
def make_context(
    recorder: RequestRecorder,
) -> Callable[..., PurgeContext]:
    """Build a PurgeContext whose HTTP client is backed by ``recorder``."""

    def _make(
        helix_config: Mapping[str, Any] | None = None,
        org: str = "org",
        site: str = "site",
        store_code: str | None = "us",
        store_view_code: str | None = "en",
        env: Mapping[str, str] | None = None,
    ) -> PurgeContext:
        return PurgeContext(
            config=RequestInfo(
                org=org, site=site, store_code=store_code, store_view_code=store_view_code
            ),
            http=recorder.client(),
            attributes=ContextAttributes(helix_config_cache=helix_config),
            env=env or {},
        )

    return _make
