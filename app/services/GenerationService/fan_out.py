import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")


async def fan_out(calls: Sequence[Callable[[], Awaitable[T]]]) -> list[T]:
    """
    Start every call at once and wait for all of them.

    Results come back in dispatch order, whatever order the calls finish in.
    The first failure cancels the calls still running and is re-raised alone;
    partial results are never returned.
    """
    tasks = [asyncio.ensure_future(call()) for call in calls]
    if not tasks:
        return []

    try:
        return list(await asyncio.gather(*tasks))
    except Exception:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        raise


async def fan_out_replicated(call: Callable[[], Awaitable[T]], count: int) -> list[T]:
    """Run the same call ``count`` times concurrently; each is an independent sample."""
    if count < 1:
        raise ValueError("count must be at least 1")
    return await fan_out([call] * count)
