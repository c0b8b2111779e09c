# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Bounded concurrency pool.

run_all processes a sequence of items with an async worker, keeping at most
`concurrency` worker calls in flight. It starts `concurrency` lanes that all
pull from one shared iterator: whenever a lane's current item finishes, it
takes the next one. There are no waves and no barrier, a slow item only
holds up its own lane.

Failure handling is fail-fast. After the first worker exception no lane
picks up another item, the calls already in flight run to completion, and
run_all raises WorkerError chained to the original exception.

Everything runs on one event loop thread. Lanes only switch at `await`
points, so pulling from the shared iterator needs no lock.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from lidbench.benchmark.exceptions import WorkerError
from lidbench.logging.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def run_all(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[None]],
    concurrency: int,
) -> None:
    """
    Run `worker` over every item with at most `concurrency` calls in flight.

    Completion order is not guaranteed.

    Raises:
        ValueError: If concurrency isn't a positive integer.
        WorkerError: If any worker call raised. Only the first failure is
            raised; later ones from calls that were already in flight are
            logged.
    """
    if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError(f"concurrency must be a positive integer, got {concurrency!r}")

    pending = list(items)
    if not pending:
        return

    queue = iter(enumerate(pending))
    failure: WorkerError | None = None

    async def lane() -> None:
        nonlocal failure
        while failure is None:
            try:
                index, item = next(queue)
            except StopIteration:
                return

            try:
                await worker(item)
            except Exception as exc:
                if failure is None:
                    failure = WorkerError(item, index, exc)
                    failure.__cause__ = exc
                else:
                    logger.warning(
                        "Additional worker failure after pool abort",
                        extra={"index": index, "error": f"{type(exc).__name__}: {exc}"},
                    )
                return

    await asyncio.gather(*(lane() for _ in range(min(concurrency, len(pending)))))

    if failure is not None:
        raise failure
