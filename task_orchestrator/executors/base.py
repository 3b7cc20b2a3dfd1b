from __future__ import annotations

from typing import Awaitable, Callable, Protocol, runtime_checkable


@runtime_checkable
class TaskExecutor(Protocol):
    """
    Per-task workload consumed by the engine.

    ``execute`` returns normally on success and raises on failure; the
    exception message is recorded as the task's error description. It must
    be safe to call concurrently for different (or identical) task ids.
    """

    async def execute(self, task_id: int) -> None:
        ...


class FunctionExecutor:
    """Adapts a plain ``async def fn(task_id)`` callable to ``TaskExecutor``."""

    def __init__(self, fn: Callable[[int], Awaitable[None]]) -> None:
        self._fn = fn

    async def execute(self, task_id: int) -> None:
        await self._fn(task_id)

    def __repr__(self) -> str:
        name = getattr(self._fn, "__qualname__", repr(self._fn))
        return f"{self.__class__.__name__}({name})"
