"""Utility helpers for the task orchestrator."""

from .logging_config import setup_logging

__all__ = [
    "setup_logging",
]
