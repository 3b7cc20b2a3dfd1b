"""
Reference workload executed for every task.

Each execution performs three steps:
    1. GET a fixed URL and fully read the body (non-2xx is a failure)
    2. Wait a fixed delay
    3. Emit a completion event to the log

Requests run on a private thread pool so the event loop stays free while a
large batch is in flight. Each pool thread owns its own requests.Session.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List

import requests

from ..config import OrchestratorConfig
from ..errors import TaskExecutionError

logger = logging.getLogger(__name__)

DEFAULT_FETCH_URL = OrchestratorConfig.fetch_url


class BlueprintExecutor:
    """
    Network-backed ``TaskExecutor``.

    Example:
        >>> executor = BlueprintExecutor(delay_seconds=0.5)
        >>> await executor.execute(101)
        >>> executor.close()
    """

    def __init__(
        self,
        fetch_url: str = DEFAULT_FETCH_URL,
        request_timeout: float = 10.0,
        delay_seconds: float = 5.0,
        max_workers: int = 32,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self.fetch_url = fetch_url
        self.request_timeout = request_timeout
        self.delay_seconds = delay_seconds
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="blueprint_fetch",
        )

    @classmethod
    def from_config(cls, config: OrchestratorConfig) -> "BlueprintExecutor":
        return cls(
            fetch_url=config.fetch_url,
            request_timeout=config.request_timeout,
            delay_seconds=config.delay_seconds,
            max_workers=config.max_workers,
        )

    async def execute(self, task_id: int) -> None:
        await self.fetch_data(self.fetch_url)
        await self.long_delay()
        self.emit_event(task_id)

    async def fetch_data(self, url: str) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self._executor, self._fetch_sync, url)

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def _fetch_sync(self, url: str) -> None:
        response = self._session().get(url, timeout=self.request_timeout)
        if not response.ok:
            status = f"{response.status_code} {response.reason or ''}".strip()
            raise TaskExecutionError(f"HTTP request failed with status: {status}")
        # Read the whole body so the request is really finished.
        _ = response.text

    async def long_delay(self) -> None:
        await asyncio.sleep(self.delay_seconds)

    def emit_event(self, task_id: int) -> None:
        logger.info("Task %d completed successfully", task_id)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()

    def __enter__(self) -> "BlueprintExecutor":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
