"""Bounded fan-out for independent, read-only awaitables."""

import asyncio
from collections.abc import Awaitable, Iterable
from typing import TypeVar

T = TypeVar("T")


async def gather_bounded(aws: Iterable[Awaitable[T]], limit: int) -> list[T]:
    """asyncio.gather with at most `limit` awaitables in flight.

    Results keep input order. The first exception propagates and the
    remaining tasks are cancelled and awaited before returning, so later
    failures are retrieved rather than left on unfinished tasks.
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _run(aw: Awaitable[T]) -> T:
        async with semaphore:
            return await aw

    tasks = [asyncio.ensure_future(_run(aw)) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        # Drains cancellations and retrieves every task's exception.
        await asyncio.gather(*tasks, return_exceptions=True)
