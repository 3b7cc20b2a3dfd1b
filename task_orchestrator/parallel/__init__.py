"""
Concurrent execution engine.

Key Components:
    - TaskOrchestrator: runs a batch and returns one result per task
    - BoundedQueueMultiplexer: fan-in through a bounded completion queue
    - UnorderedPoolMultiplexer: fan-in by polling the pending futures

Example:
    >>> from task_orchestrator.parallel import TaskOrchestrator
    >>> async with TaskOrchestrator(executor=my_executor) as orchestrator:
    ...     batch = await orchestrator.run_batch(tasks)
"""

from .multiplexer import (
    BoundedQueueMultiplexer,
    CompletionMultiplexer,
    UnorderedPoolMultiplexer,
)
from .runner import TaskOrchestrator, run_batch_sync

__all__ = [
    "TaskOrchestrator",
    "run_batch_sync",
    "CompletionMultiplexer",
    "BoundedQueueMultiplexer",
    "UnorderedPoolMultiplexer",
]
