"""Tabular task source and report sink."""

from .tabular import (
    parse_tasks_csv,
    read_tasks_from_csv,
    write_outputs_to_csv,
    write_results_to_csv,
)

__all__ = [
    "parse_tasks_csv",
    "read_tasks_from_csv",
    "write_outputs_to_csv",
    "write_results_to_csv",
]
