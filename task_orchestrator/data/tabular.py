"""CSV task source and report sink."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable, List

from ..aggregation import aggregate_results
from ..errors import TaskInputError, TaskOutputError
from ..types import MAX_TASK_ID, TaskInput, TaskOutput, TaskResult

INPUT_FIELDS = ("task_id", "task_type")
OUTPUT_FIELDS = ("task_id", "final_status", "error_info")


def _parse_task_id(raw: str, line: int) -> int:
    value = raw.strip()
    if not (value.isascii() and value.isdigit()):
        raise TaskInputError(f"line {line}: invalid task_id {raw!r}")
    task_id = int(value)
    if task_id > MAX_TASK_ID:
        raise TaskInputError(f"line {line}: task_id {task_id} out of range")
    return task_id


def parse_tasks_csv(text: str) -> List[TaskInput]:
    """
    Parse CSV text with a ``task_id,task_type`` header.

    Raises:
        TaskInputError: on a missing header column or any malformed row
    """
    reader = csv.DictReader(io.StringIO(text, newline=""))
    try:
        header = reader.fieldnames
    except csv.Error as exc:
        raise TaskInputError(f"line 1: {exc}") from exc
    if header is None:
        raise TaskInputError("missing header row")
    missing = [name for name in INPUT_FIELDS if name not in header]
    if missing:
        raise TaskInputError(f"missing header columns: {', '.join(missing)}")

    tasks: List[TaskInput] = []
    try:
        for row in reader:
            line = reader.line_num
            if None in row or any(value is None for value in row.values()):
                raise TaskInputError(
                    f"line {line}: expected {len(header)} fields"
                )
            tasks.append(
                TaskInput(
                    task_id=_parse_task_id(row["task_id"], line),
                    task_type=row["task_type"],
                )
            )
    except csv.Error as exc:
        raise TaskInputError(f"line {reader.line_num}: {exc}") from exc
    return tasks


def read_tasks_from_csv(file_path: str | Path) -> List[TaskInput]:
    try:
        text = Path(file_path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise TaskInputError(f"cannot read {file_path}: {exc}") from exc
    return parse_tasks_csv(text)


def write_outputs_to_csv(outputs: Iterable[TaskOutput]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    try:
        writer.writerow(OUTPUT_FIELDS)
        for output in outputs:
            writer.writerow(output.as_row())
    except csv.Error as exc:
        raise TaskOutputError(f"failed to serialize results: {exc}") from exc
    return buffer.getvalue()


def write_results_to_csv(results: Iterable[TaskResult]) -> str:
    """
    Render the final report: one row per distinct task id, latest result
    wins. The header is always written, even when there are no rows.
    """
    return write_outputs_to_csv(aggregate_results(results))
