"""Command-line entry point: ``task-orchestrator <tasks.csv>``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence

from dotenv import find_dotenv, load_dotenv

from .config import load_config
from .data.tabular import read_tasks_from_csv, write_results_to_csv
from .errors import ConfigError, TaskInputError, TaskOutputError
from .parallel.runner import TaskOrchestrator
from .types import BatchResult, TaskInput
from .utils import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="task-orchestrator",
        description=(
            "Run every task in a CSV file concurrently and print one "
            "terminal status per task id."
        ),
    )
    parser.add_argument("tasks_csv", help="Path to a CSV file with task_id,task_type")
    return parser


async def _run(tasks: List[TaskInput], orchestrator: TaskOrchestrator) -> BatchResult:
    async with orchestrator:
        return await orchestrator.run_batch(tasks)


def main(argv: Optional[Sequence[str]] = None) -> int:
    # argparse exits with status 2 on a wrong argument count.
    args = build_parser().parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))
    try:
        config = load_config()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    setup_logging(config.log_level, config.log_file)

    try:
        tasks = read_tasks_from_csv(args.tasks_csv)
    except TaskInputError as exc:
        print(f"Error: failed to read tasks: {exc}", file=sys.stderr)
        return EXIT_ERROR

    batch = asyncio.run(_run(tasks, TaskOrchestrator(config=config)))

    try:
        output = write_results_to_csv(batch.results)
        sys.stdout.write(output)
        sys.stdout.flush()
    except (TaskOutputError, OSError, UnicodeError) as exc:
        print(f"Error: failed to write results: {exc}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
