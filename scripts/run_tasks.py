#!/usr/bin/env python3
"""
Run every task in a CSV file and print the per-task report.

Usage:
    python scripts/run_tasks.py tasks.csv > report.csv
"""

import sys

from task_orchestrator.cli import main

if __name__ == "__main__":
    sys.exit(main())
