"""Periodic callback scheduling.

Poll timers and animation frame loops go through this interface so that
tests can drive them with a virtual clock instead of real sleeps.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Protocol

from .logger import get_logger

logger = get_logger("dashboard.scheduler")


class CancellationHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def schedule(
        self, interval_ms: float, callback: Callable[[], None]
    ) -> CancellationHandle: ...

    def now(self) -> float: ...


class TaskHandle:
    def __init__(self, task: asyncio.Task):
        self._task = task

    def cancel(self) -> None:
        self._task.cancel()

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled() or self._task.done()


class AsyncioScheduler:
    """Runs each scheduled callback from its own loop task on the running loop."""

    def now(self) -> float:
        return time.monotonic()

    def schedule(
        self, interval_ms: float, callback: Callable[[], None]
    ) -> CancellationHandle:
        interval = interval_ms / 1000

        async def _run():
            while True:
                await asyncio.sleep(interval)
                try:
                    callback()
                except Exception:  # noqa: BLE001
                    logger.exception(
                        "scheduled_callback_failed",
                        extra={"callback": getattr(callback, "__name__", repr(callback))},
                    )

        task = asyncio.get_running_loop().create_task(_run())
        return TaskHandle(task)
