"""Collapse collected results into one report row per task id."""

from __future__ import annotations

from typing import Dict, Iterable, List

from .types import TaskOutput, TaskResult


def deduplicate_results(results: Iterable[TaskResult]) -> Dict[int, TaskResult]:
    """
    Keep only the latest result for each task id.

    "Latest" means last in collection order; a later entry for an existing
    key overwrites the earlier one.
    """
    unique: Dict[int, TaskResult] = {}
    for result in results:
        unique[result.task_id] = result
    return unique


def aggregate_results(results: Iterable[TaskResult]) -> List[TaskOutput]:
    # Row order follows dict iteration and is not part of the contract.
    return [
        TaskOutput.from_result(result)
        for result in deduplicate_results(results).values()
    ]
