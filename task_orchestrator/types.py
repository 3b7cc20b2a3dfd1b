from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

MAX_TASK_ID = 2**64 - 1


class TaskStatus(Enum):
    """Lifecycle of a single task execution."""

    PENDING = "Pending"
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


@dataclass(frozen=True)
class TaskInput:
    task_id: int
    task_type: str


@dataclass(frozen=True)
class TaskResult:
    """
    Outcome of one execution attempt. Built once by the engine and never
    modified afterwards.
    """

    task_id: int
    status: TaskStatus
    error_info: Optional[str] = None


@dataclass(frozen=True)
class TaskOutput:
    task_id: int
    final_status: str
    error_info: str

    @classmethod
    def from_result(cls, result: TaskResult) -> "TaskOutput":
        # Anything that is not COMPLETED is reported as a failure.
        if result.status is TaskStatus.COMPLETED:
            final_status = TaskStatus.COMPLETED.value
        else:
            final_status = TaskStatus.FAILED.value
        return cls(
            task_id=result.task_id,
            final_status=final_status,
            error_info=result.error_info or "",
        )

    def as_row(self) -> List[str]:
        return [str(self.task_id), self.final_status, self.error_info]


@dataclass
class BatchResult:
    """Aggregated result from one engine run.

    Attributes:
        results: One TaskResult per submitted task, in collection order
        strategy: Name of the multiplexer that collected the results
        total_time_ms: Total wall-clock time
        completed_count: Number of COMPLETED results
        failed_count: Number of FAILED results
    """

    results: List[TaskResult] = field(default_factory=list)
    strategy: str = ""
    total_time_ms: float = 0.0
    completed_count: int = 0
    failed_count: int = 0

    @property
    def throughput_tps(self) -> float:
        if self.total_time_ms <= 0:
            return 0.0
        return len(self.results) / (self.total_time_ms / 1000)
