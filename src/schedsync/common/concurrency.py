"""Bounded fan-out over a shared cursor."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence


async def bounded_map[T, R](
    items: Sequence[T],
    mapper: Callable[[T], Awaitable[R]],
    *,
    concurrency: int,
) -> list[R]:
    """Apply ``mapper`` to every item with at most ``concurrency`` calls in flight.

    A fixed number of workers pull from one shared cursor, so a slow item only
    holds up its own worker. Results keep the order of ``items``. An exception
    raised by ``mapper`` propagates; callers that need per-item isolation catch
    inside the mapper.
    """

    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    results: list[R | None] = [None] * len(items)
    cursor = iter(enumerate(items))

    async def worker() -> None:
        for index, item in cursor:
            results[index] = await mapper(item)

    workers = [worker() for _ in range(min(concurrency, len(items)))]
    await asyncio.gather(*workers)
    return results  # type: ignore[return-value]


def run_blocking_map[T, R](
    items: Sequence[T],
    func: Callable[[T], R],
    *,
    concurrency: int,
) -> list[R]:
    """Synchronous front for ``bounded_map`` over blocking callables.

    Each call runs in a worker thread; ``concurrency=1`` keeps strict
    sequential order and stays on the calling thread.
    """

    if concurrency == 1:
        return [func(item) for item in items]

    async def call(item: T) -> R:
        return await asyncio.to_thread(func, item)

    return asyncio.run(bounded_map(items, call, concurrency=concurrency))
