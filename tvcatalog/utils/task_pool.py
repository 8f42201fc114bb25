"""
Bounded task pool

Runs one async worker per input item with a fixed ceiling on how many are
in flight. Every pool slot pulls its next item from one shared cursor, so a
slow item holds a single slot and never widens the fan-out.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 5


async def run_all(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    concurrency: int = DEFAULT_CONCURRENCY,
    *,
    label: str = "task",
) -> list[R | None]:
    """
    Run worker over every item with bounded concurrency.

    Args:
        items: Inputs to process
        worker: Async callable applied to each item
        concurrency: Maximum number of workers in flight
        label: Name used in log messages

    Returns:
        Results aligned with items by index; an item whose worker raised
        yields None at its index

    Raises:
        ValueError: If concurrency is < 1
    """
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    pending = list(items)
    results: list[R | None] = [None] * len(pending)
    if not pending:
        return results

    cursor = iter(enumerate(pending))

    async def _drain(slot: int) -> None:
        # Each slot writes only the indices it pulled from the cursor
        for index, item in cursor:
            try:
                results[index] = await worker(item)
            except Exception as exc:
                logger.warning(
                    "[%s %s/%s] Failed in slot %s: %s",
                    label,
                    index + 1,
                    len(pending),
                    slot,
                    exc,
                )
                results[index] = None

    slots = min(concurrency, len(pending))
    logger.debug("Running %s %s item(s) across %s slot(s)", len(pending), label, slots)
    await asyncio.gather(*(_drain(slot) for slot in range(slots)))
    return results
