"""Helpers shared by the purge clients and the dispatcher."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Iterator, Mapping, TypeVar

from pydantic import BaseModel

from cdnpurge.errors import PurgeConfigError

if TYPE_CHECKING:
    from cdnpurge.context import PurgeContext

T = TypeVar("T")


def assert_required_properties(obj: BaseModel | Mapping[str, Any], msg: str, *names: str) -> None:
    """Raise on the first of ``names`` that is missing or falsy in ``obj``.

    Names are the external (JSON) property names. Models are compared via
    their alias dump so ``serviceId`` resolves to ``service_id``.

    Raises:
        PurgeConfigError: ``{msg}: "{name}" is required``
    """
    values = obj.model_dump(by_alias=True) if isinstance(obj, BaseModel) else obj
    for name in names:
        if not values.get(name):
            raise PurgeConfigError(f'{msg}: "{name}" is required', field=name)


def next_request_id(ctx: PurgeContext) -> int:
    """Increment and return the context's sub-request counter (starts at 1)."""
    ctx.attributes.sub_request_id += 1
    return ctx.attributes.sub_request_id


def chunked(items: Iterable[T], size: int) -> Iterator[list[T]]:
    """Split ``items`` into consecutive lists of at most ``size`` elements."""
    if size < 1:
        raise ValueError("size must be positive")
    batch: list[T] = []
    for item in items:
        batch.append(item)
        if len(batch) == size:
            yield batch
            batch = []
    if batch:
        yield batch


async def process_queue(
    items: Iterable[T],
    handler: Callable[[T], Awaitable[None]],
    concurrency: int = 8,
) -> None:
    """Run ``handler`` over ``items`` with at most ``concurrency`` in flight.

    Workers pull from a shared iterator. After the first failure no further
    items are started; the in-flight ones finish and the failure is
    re-raised.
    """
    iterator = iter(items)
    failed = False

    async def worker() -> None:
        nonlocal failed
        for item in iterator:
            if failed:
                return
            try:
                await handler(item)
            except Exception:
                failed = True
                raise

    workers = [asyncio.create_task(worker()) for _ in range(max(1, concurrency))]
    results = await asyncio.gather(*workers, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
