"""
Task Orchestrator.

Runs a batch of independent tasks concurrently and returns one terminal
result per submitted task.

Architecture:
    - One asyncio task per input (no concurrency cap at this level)
    - Per-task failures are converted to FAILED results, never raised
    - Fan-in through a CompletionMultiplexer chosen by batch size

Strategy selection:
    - Up to ``streaming_threshold`` tasks: bounded completion queue
    - Above it: unordered pool polled directly, no queue allocated

Results come back in completion order. Deduplication by task id happens
later, in ``task_orchestrator.aggregation``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Sequence

from ..config import OrchestratorConfig
from ..executors.base import TaskExecutor
from ..executors.blueprint import BlueprintExecutor
from ..types import BatchResult, TaskInput, TaskResult, TaskStatus
from .multiplexer import (
    BoundedQueueMultiplexer,
    CompletionMultiplexer,
    UnorderedPoolMultiplexer,
)

logger = logging.getLogger(__name__)


class TaskOrchestrator:
    """
    Concurrent executor for a batch of identified tasks.

    Example:
        >>> orchestrator = TaskOrchestrator(executor=my_executor)
        >>> batch = await orchestrator.run_batch(tasks)
        >>> print(f"{batch.completed_count}/{len(batch.results)} completed")

    The executor defaults to ``BlueprintExecutor`` built from the config;
    in that case the orchestrator owns it and closes it on exit.
    """

    def __init__(
        self,
        executor: TaskExecutor | None = None,
        config: OrchestratorConfig | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            executor: Per-task workload; BlueprintExecutor when omitted
            config: Engine settings; defaults when omitted
            progress_callback: Optional callback(collected, total)
        """
        self._config = config or OrchestratorConfig()
        self._owns_executor = executor is None
        self._executor: TaskExecutor = executor or BlueprintExecutor.from_config(
            self._config
        )
        self._progress_callback = progress_callback

        self._collected_count = 0
        self._total_count = 0

        logger.debug(
            "TaskOrchestrator initialized: executor=%r, threshold=%d, capacity=%d",
            self._executor,
            self._config.streaming_threshold,
            self._config.queue_capacity,
        )

    @property
    def config(self) -> OrchestratorConfig:
        return self._config

    @property
    def executor(self) -> TaskExecutor:
        return self._executor

    def select_multiplexer(self, task_count: int) -> CompletionMultiplexer:
        if task_count > self._config.streaming_threshold:
            return UnorderedPoolMultiplexer()
        return BoundedQueueMultiplexer(capacity=self._config.queue_capacity)

    async def execute_tasks(self, tasks: Sequence[TaskInput]) -> list[TaskResult]:
        """Run tasks through the bounded completion queue."""
        multiplexer = BoundedQueueMultiplexer(capacity=self._config.queue_capacity)
        return await self._collect(multiplexer, tasks)

    async def execute_tasks_streaming(
        self, tasks: Sequence[TaskInput]
    ) -> list[TaskResult]:
        """Run tasks through the unordered pool; suited to large batches."""
        return await self._collect(UnorderedPoolMultiplexer(), tasks)

    async def run_batch(self, tasks: Sequence[TaskInput]) -> BatchResult:
        """
        Run a batch with the strategy matching its size.

        Args:
            tasks: Tasks to execute; duplicate task ids are allowed

        Returns:
            BatchResult with one result per task and run statistics
        """
        multiplexer = self.select_multiplexer(len(tasks))

        start_time = time.time()
        logger.info(
            "Starting batch: %d tasks, strategy=%s",
            len(tasks),
            multiplexer.name,
        )

        results = await self._collect(multiplexer, tasks)

        total_time_ms = (time.time() - start_time) * 1000
        completed_count = sum(1 for r in results if r.status is TaskStatus.COMPLETED)
        batch = BatchResult(
            results=results,
            strategy=multiplexer.name,
            total_time_ms=total_time_ms,
            completed_count=completed_count,
            failed_count=len(results) - completed_count,
        )

        logger.info(
            "Batch complete: %d/%d completed, %d failed, %.1fs total, %.2f tasks/s",
            batch.completed_count,
            len(results),
            batch.failed_count,
            total_time_ms / 1000,
            batch.throughput_tps,
        )
        return batch

    async def execute_single_task(self, task_id: int) -> TaskResult:
        """
        Execute one task and convert its outcome into a terminal result.

        Any ``Exception`` from the executor becomes a FAILED result carrying
        the exception message; nothing propagates to sibling tasks.
        """
        logger.debug(
            "Task %d: %s -> %s",
            task_id,
            TaskStatus.PENDING.value,
            TaskStatus.RUNNING.value,
        )
        try:
            await self._executor.execute(task_id)
        except Exception as e:
            error_info = str(e) or e.__class__.__name__
            logger.warning("Task %d failed: %s", task_id, error_info[:200])
            return TaskResult(
                task_id=task_id,
                status=TaskStatus.FAILED,
                error_info=error_info,
            )

        return TaskResult(task_id=task_id, status=TaskStatus.COMPLETED)

    async def _run_one(self, task: TaskInput) -> TaskResult:
        return await self.execute_single_task(task.task_id)

    async def _collect(
        self,
        multiplexer: CompletionMultiplexer,
        tasks: Sequence[TaskInput],
    ) -> list[TaskResult]:
        self._collected_count = 0
        self._total_count = len(tasks)
        return await multiplexer.collect(tasks, self._run_one, self._on_result)

    def _on_result(self, result: TaskResult) -> None:
        self._collected_count += 1

        interval = self._config.progress_interval
        if interval and self._collected_count % interval == 0:
            logger.info(
                "Progress: %d/%d (%.1f%%)",
                self._collected_count,
                self._total_count,
                100 * self._collected_count / self._total_count,
            )

        if self._progress_callback:
            self._progress_callback(self._collected_count, self._total_count)

    def close(self) -> None:
        """Release the executor's resources if this orchestrator created it."""
        if self._owns_executor and hasattr(self._executor, "close"):
            self._executor.close()

    async def __aenter__(self) -> "TaskOrchestrator":
        return self

    async def __aexit__(
        self,
        exc_type: Any,
        exc_val: Any,
        exc_tb: Any,
    ) -> None:
        self.close()


def run_batch_sync(
    tasks: Sequence[TaskInput],
    executor: TaskExecutor | None = None,
    config: OrchestratorConfig | None = None,
) -> BatchResult:
    """
    Synchronous wrapper for batch processing.

    Starts an event loop with ``asyncio.run``; do not call from async code.
    """

    async def _run() -> BatchResult:
        async with TaskOrchestrator(executor=executor, config=config) as orchestrator:
            return await orchestrator.run_batch(tasks)

    return asyncio.run(_run())
