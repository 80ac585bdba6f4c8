"""Tests for shared purge helpers."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Callable

import pytest

from cdnpurge.errors import PurgeConfigError
from cdnpurge.models import CdnConfig
from cdnpurge.utils import assert_required_properties, chunked, next_request_id, process_queue

if TYPE_CHECKING:
    from cdnpurge.context import PurgeContext


class TestAssertRequiredProperties:
    """Tests for assert_required_properties."""

    def test_model_uses_json_names(self) -> None:
        """Model fields are looked up by their JSON names."""
        config = CdnConfig(host="h", serviceId="svc")
        assert_required_properties(config, "invalid", "host", "serviceId")

        with pytest.raises(PurgeConfigError, match='invalid: "authToken" is required'):
            assert_required_properties(config, "invalid", "host", "serviceId", "authToken")

    def test_mapping(self) -> None:
        """Plain mappings are supported; empty strings count as missing."""
        with pytest.raises(PurgeConfigError) as exc_info:
            assert_required_properties({"a": "x", "b": ""}, "bad", "a", "b", "c")

        assert exc_info.value.field == "b"


class TestChunked:
    """Tests for chunked."""

    def test_splits(self) -> None:
        """Last chunk holds the remainder."""
        assert list(chunked(range(7), 3)) == [[0, 1, 2], [3, 4, 5], [6]]

    def test_empty(self) -> None:
        """No items, no chunks."""
        assert list(chunked([], 3)) == []

    def test_invalid_size(self) -> None:
        """Size must be positive."""
        with pytest.raises(ValueError):
            list(chunked([1], 0))


class TestNextRequestId:
    """Tests for sub-request numbering."""

    def test_increments(self, make_context: Callable[..., PurgeContext]) -> None:
        """Ids start at 1 and increase per call."""
        ctx = make_context()
        assert next_request_id(ctx) == 1
        assert next_request_id(ctx) == 2
        assert ctx.attributes.sub_request_id == 2


class TestProcessQueue:
    """Tests for the bounded concurrent queue."""

    @pytest.mark.asyncio
    async def test_processes_all_items(self) -> None:
        """Every item is handled once."""
        handled: list[int] = []

        async def handler(item: int) -> None:
            await asyncio.sleep(0)
            handled.append(item)

        await process_queue(range(20), handler, concurrency=4)

        assert sorted(handled) == list(range(20))

    @pytest.mark.asyncio
    async def test_concurrency_bound(self) -> None:
        """No more than ``concurrency`` handlers run at once."""
        running = 0
        peak = 0

        async def handler(item: int) -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.001)
            running -= 1

        await process_queue(range(12), handler, concurrency=3)

        assert peak == 3

    @pytest.mark.asyncio
    async def test_failure_stops_new_work(self) -> None:
        """The first error is raised and remaining items are not started."""
        started: list[int] = []

        async def handler(item: int) -> None:
            started.append(item)
            await asyncio.sleep(0)
            if item == 2:
                raise RuntimeError("batch 2 failed")

        with pytest.raises(RuntimeError, match="batch 2 failed"):
            await process_queue(range(10), handler, concurrency=2)

        assert len(started) < 10
