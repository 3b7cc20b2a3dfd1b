import asyncio
import logging
import threading
from unittest.mock import MagicMock

import pytest
import requests

from task_orchestrator.config import OrchestratorConfig
from task_orchestrator.errors import TaskExecutionError
from task_orchestrator.executors import BlueprintExecutor, TaskExecutor
from task_orchestrator.parallel.runner import TaskOrchestrator
from task_orchestrator.types import TaskStatus


def make_session(ok: bool = True, status_code: int = 200, reason: str = "OK") -> MagicMock:
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.reason = reason
    response.text = "ok"
    session = MagicMock(spec=requests.Session)
    session.get.return_value = response
    return session


@pytest.fixture
def executor_factory():
    created = []

    def _make(session, **kwargs):
        kwargs.setdefault("delay_seconds", 0.0)
        executor = BlueprintExecutor(
            fetch_url="http://test.local/get", session_factory=lambda: session, **kwargs
        )
        created.append(executor)
        return executor

    yield _make
    for executor in created:
        executor.close()


def test_satisfies_executor_protocol(executor_factory):
    assert isinstance(executor_factory(make_session()), TaskExecutor)


@pytest.mark.asyncio
async def test_fetch_data_success(executor_factory):
    session = make_session()
    executor = executor_factory(session)

    await executor.fetch_data("http://test.local/test")

    session.get.assert_called_once_with("http://test.local/test", timeout=10.0)


@pytest.mark.asyncio
async def test_fetch_data_failure(executor_factory):
    executor = executor_factory(
        make_session(ok=False, status_code=500, reason="Internal Server Error")
    )

    with pytest.raises(TaskExecutionError) as exc_info:
        await executor.fetch_data("http://test.local/test")

    assert str(exc_info.value) == (
        "HTTP request failed with status: 500 Internal Server Error"
    )


@pytest.mark.asyncio
async def test_execute_emits_completion_event(executor_factory, caplog):
    caplog.set_level(logging.INFO, logger="task_orchestrator.executors.blueprint")
    session = make_session()
    executor = executor_factory(session, request_timeout=2.5)

    await executor.execute(101)

    session.get.assert_called_once_with("http://test.local/get", timeout=2.5)
    assert "Task 101 completed successfully" in caplog.text


@pytest.mark.asyncio
async def test_connection_error_reported_as_failed_task(executor_factory):
    session = make_session()
    session.get.side_effect = requests.ConnectionError("connection refused")
    orchestrator = TaskOrchestrator(executor=executor_factory(session))

    result = await orchestrator.execute_single_task(7)

    assert result.status is TaskStatus.FAILED
    assert result.error_info == "connection refused"


@pytest.mark.asyncio
async def test_http_error_reported_as_failed_task(executor_factory):
    executor = executor_factory(make_session(ok=False, status_code=404, reason="Not Found"))
    orchestrator = TaskOrchestrator(executor=executor)

    result = await orchestrator.execute_single_task(9)
    assert result.status is TaskStatus.FAILED
    assert result.error_info == "HTTP request failed with status: 404 Not Found"


def test_from_config():
    config = OrchestratorConfig(
        fetch_url="http://example.invalid/",
        request_timeout=3.0,
        delay_seconds=0.25,
        max_workers=4,
    )
    executor = BlueprintExecutor.from_config(config)
    try:
        assert executor.fetch_url == "http://example.invalid/"
        assert executor.request_timeout == 3.0
        assert executor.delay_seconds == 0.25
    finally:
        executor.close()


@pytest.mark.asyncio
async def test_close_releases_session():
    session = make_session()
    with BlueprintExecutor(session_factory=lambda: session, delay_seconds=0.0) as executor:
        await executor.execute(1)
    session.close.assert_called_once()


@pytest.mark.asyncio
async def test_each_worker_thread_gets_its_own_session():
    both_busy = threading.Barrier(2, timeout=5)
    sessions = []

    def new_session():
        session = make_session()
        response = session.get.return_value

        def get(*args, **kwargs):
            both_busy.wait()
            return response

        session.get.side_effect = get
        sessions.append(session)
        return session

    with BlueprintExecutor(session_factory=new_session, max_workers=2) as executor:
        await asyncio.gather(
            executor.fetch_data("http://test.local/a"),
            executor.fetch_data("http://test.local/b"),
        )

    assert len(sessions) == 2
    assert all(session.get.call_count == 1 for session in sessions)
    assert all(session.close.call_count == 1 for session in sessions)
