"""
Completion multiplexers: concurrent fan-out, order-agnostic fan-in.

Both backends launch one asyncio task per input and return exactly one
``TaskResult`` per input, in completion order. They differ only in how
finished results reach the collector:

    - BoundedQueueMultiplexer: producers push into a bounded asyncio.Queue
      and a single collector drains it.
    - UnorderedPoolMultiplexer: the collector polls the set of pending
      futures directly, without an intermediate queue.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Sequence

from ..types import TaskInput, TaskResult

logger = logging.getLogger(__name__)

RunOne = Callable[[TaskInput], Awaitable[TaskResult]]
ResultCallback = Callable[[TaskResult], None]

DEFAULT_QUEUE_CAPACITY = 1000


class CompletionMultiplexer(ABC):
    """Runs ``run_one`` for every task and gathers the results."""

    name: str = "multiplexer"

    @abstractmethod
    async def collect(
        self,
        tasks: Sequence[TaskInput],
        run_one: RunOne,
        on_result: Optional[ResultCallback] = None,
    ) -> list[TaskResult]:
        """
        Execute all tasks concurrently.

        Args:
            tasks: Tasks to launch, one unit of execution each
            run_one: Coroutine function producing the task's terminal result
            on_result: Optional callback invoked as each result is collected

        Returns:
            One TaskResult per task, in collection order
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class _EndOfStream:
    pass


_END_OF_STREAM = _EndOfStream()


class BoundedQueueMultiplexer(CompletionMultiplexer):
    """
    Fan-in through a bounded completion queue.

    The capacity only caps results that are finished but not yet collected;
    producers block on ``put`` solely when the collector falls that far
    behind.
    """

    name = "bounded_queue"

    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity

    async def collect(
        self,
        tasks: Sequence[TaskInput],
        run_one: RunOne,
        on_result: Optional[ResultCallback] = None,
    ) -> list[TaskResult]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.capacity)

        async def produce(task: TaskInput) -> None:
            result = await run_one(task)
            await queue.put(result)

        producers = [asyncio.create_task(produce(task)) for task in tasks]

        async def close_when_done() -> None:
            # Every put has returned once gather does, so the marker is
            # always the last item in the queue.
            await asyncio.gather(*producers, return_exceptions=True)
            await queue.put(_END_OF_STREAM)

        closer = asyncio.create_task(close_when_done())

        results: list[TaskResult] = []
        while True:
            item = await queue.get()
            if item is _END_OF_STREAM:
                break
            results.append(item)
            if on_result is not None:
                on_result(item)

        await closer
        # Surface anything the per-task wrapper did not turn into a result.
        await asyncio.gather(*producers)

        if len(results) != len(tasks):
            raise RuntimeError(
                f"Collected {len(results)} results for {len(tasks)} tasks"
            )
        return results

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(capacity={self.capacity})"


class UnorderedPoolMultiplexer(CompletionMultiplexer):
    """Fan-in by polling a single set of pending futures."""

    name = "unordered_pool"

    async def collect(
        self,
        tasks: Sequence[TaskInput],
        run_one: RunOne,
        on_result: Optional[ResultCallback] = None,
    ) -> list[TaskResult]:
        pending = {asyncio.ensure_future(run_one(task)) for task in tasks}

        results: list[TaskResult] = []
        while pending:
            done, pending = await asyncio.wait(
                pending, return_when=asyncio.FIRST_COMPLETED
            )
            for future in done:
                try:
                    result = future.result()
                except BaseException:
                    # Let the rest of the set finish before surfacing the error.
                    await asyncio.gather(*pending, return_exceptions=True)
                    raise
                results.append(result)
                if on_result is not None:
                    on_result(result)

        return results
