"""Per-task workloads the engine can drive."""

from .base import FunctionExecutor, TaskExecutor
from .blueprint import BlueprintExecutor

__all__ = [
    "TaskExecutor",
    "FunctionExecutor",
    "BlueprintExecutor",
]
