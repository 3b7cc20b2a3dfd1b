"""Concurrent batch task runner with per-task failure isolation."""

from .aggregation import aggregate_results, deduplicate_results
from .config import OrchestratorConfig, load_config
from .errors import (
    ConfigError,
    TaskExecutionError,
    TaskInputError,
    TaskOrchestratorError,
    TaskOutputError,
)
from .executors import BlueprintExecutor, FunctionExecutor, TaskExecutor
from .parallel import TaskOrchestrator, run_batch_sync
from .types import BatchResult, TaskInput, TaskOutput, TaskResult, TaskStatus

__version__ = "0.1.0"

__all__ = [
    "TaskOrchestrator",
    "run_batch_sync",
    "TaskExecutor",
    "FunctionExecutor",
    "BlueprintExecutor",
    "OrchestratorConfig",
    "load_config",
    "aggregate_results",
    "deduplicate_results",
    "TaskInput",
    "TaskStatus",
    "TaskResult",
    "TaskOutput",
    "BatchResult",
    "TaskOrchestratorError",
    "TaskInputError",
    "TaskOutputError",
    "TaskExecutionError",
    "ConfigError",
]
