from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set

from meeting_dashboard.core.logger import get_logger
from meeting_dashboard.core.scheduler import CancellationHandle, Scheduler
from meeting_dashboard.domain.models import DashboardStatus, PollCycleResult
from meeting_dashboard.infrastructure.metrics import (
    POLL_CYCLES_IN_FLIGHT,
    POLL_CYCLES_SKIPPED_TOTAL,
    POLL_CYCLES_TOTAL,
)
from meeting_dashboard.services.fetch_tasks import FetchTaskSet
from meeting_dashboard.services.metric_store import MetricStore
from meeting_dashboard.services.notifications import Notifier

logger = get_logger("dashboard.poll_aggregator")


class PollCycleAggregator:
    """Runs every fetch task concurrently on a fixed cadence.

    A cycle waits for all tasks to settle (never fail-fast). Each successful
    task commits to the store as soon as it completes; failed tasks leave
    their snapshot untouched and have already notified the operator. The
    next scheduled cycle is the only retry. Once stopped, whatever a cycle
    launched earlier still produces is dropped and changes nothing.
    """

    def __init__(
        self,
        store: MetricStore,
        tasks: FetchTaskSet,
        notifier: Notifier,
        scheduler: Scheduler,
        poll_interval_ms: int,
        single_flight: bool = True,
        success_message: str = "All metrics refreshed successfully",
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.tasks = tasks
        self.notifier = notifier
        self.scheduler = scheduler
        self.poll_interval_ms = poll_interval_ms
        self.single_flight = single_flight
        self.success_message = success_message
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self._timer: Optional[CancellationHandle] = None
        self._in_flight: Set[asyncio.Task] = set()
        self._running_cycles = 0
        self._closed = False
        # Bumped by stop(); cycles launched under an older value are stale.
        self._generation = 0
        self._cycle_listeners: List[Callable[[PollCycleResult], None]] = []
        self.first_cycle_done = asyncio.Event()

        self.last_result: Optional[PollCycleResult] = None
        self.last_success_at: Optional[datetime] = None
        self.cycles_completed = 0

    @property
    def running(self) -> bool:
        return bool(self._in_flight) or self._running_cycles > 0

    @property
    def status(self) -> DashboardStatus:
        return "refreshing" if self.running else "idle"

    def start(self):
        """Run one cycle now and then one every ``poll_interval_ms``."""
        if self._timer is not None:
            return
        self._closed = False
        logger.info(
            "poll_aggregator_started",
            extra={
                "poll_interval_ms": self.poll_interval_ms,
                "single_flight": self.single_flight,
            },
        )
        self.trigger(source="startup")
        self._timer = self.scheduler.schedule(self.poll_interval_ms, self._on_timer)

    def stop(self):
        """Cancel the timer; in-flight requests finish but their results are dropped."""
        self._closed = True
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        logger.info(
            "poll_aggregator_stopped", extra={"cycles_in_flight": len(self._in_flight)}
        )

    def trigger(self, source: str = "manual") -> Optional[asyncio.Task]:
        """Launch a cycle without waiting for it. Returns None when skipped."""
        if self._closed:
            return None
        if self.single_flight and self.running:
            POLL_CYCLES_SKIPPED_TOTAL.inc()
            logger.info("poll_cycle_skipped", extra={"source": source})
            return None
        task = asyncio.get_running_loop().create_task(self.run_cycle())
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    def add_cycle_listener(
        self, listener: Callable[[PollCycleResult], None]
    ) -> Callable[[], None]:
        """Call ``listener`` after each cycle that settles while running."""
        self._cycle_listeners.append(listener)

        def _remove():
            if listener in self._cycle_listeners:
                self._cycle_listeners.remove(listener)

        return _remove

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _on_timer(self):
        self.trigger(source="timer")

    async def wait_idle(self):
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def run_cycle(self) -> PollCycleResult:
        self._running_cycles += 1
        POLL_CYCLES_IN_FLIGHT.inc()
        keys = self.tasks.keys
        generation = self._generation
        logger.info("poll_cycle_started", extra={"tasks": len(keys)})
        try:
            if not self.tasks.has_credential:
                logger.warning("poll_cycle_auth_missing")
                if not self._closed:
                    self.notifier.auth_missing()
                outcomes = {key: False for key in keys}
            else:
                settled = await asyncio.gather(
                    *(self._run_task(key, generation) for key in keys),
                    return_exceptions=True,
                )
                outcomes = self._collect(keys, settled)

            result = PollCycleResult.from_outcomes(outcomes, self._clock())
            self._record(result, generation)
            return result
        finally:
            self._running_cycles -= 1
            POLL_CYCLES_IN_FLIGHT.dec()

    async def _run_task(self, key: str, generation: int) -> bool:
        outcome = await self.tasks.fetch(
            key, should_notify=lambda: self._is_current(generation)
        )
        if not outcome.ok:
            return False
        if not self._is_current(generation):
            logger.debug("late_response_ignored", extra={"metric": key})
        else:
            self.store.update(key, outcome.value)
        return True

    def _collect(self, keys, settled) -> Dict[str, bool]:
        outcomes: Dict[str, bool] = {}
        for key, res in zip(keys, settled):
            if isinstance(res, BaseException):
                logger.error(
                    "fetch_task_crashed", exc_info=res, extra={"metric": key}
                )
                outcomes[key] = False
            else:
                outcomes[key] = res
        return outcomes

    def _record(self, result: PollCycleResult, generation: int):
        if not self._is_current(generation):
            logger.info(
                "late_poll_cycle_discarded",
                extra={"all_succeeded": result.all_succeeded},
            )
            return
        self.last_result = result
        self.cycles_completed += 1
        self.first_cycle_done.set()
        POLL_CYCLES_TOTAL.labels(
            result="success" if result.all_succeeded else "partial_failure"
        ).inc()

        if result.all_succeeded:
            self.last_success_at = result.completed_at
            self.notifier.refreshed(self.success_message)
            logger.info("poll_cycle_completed", extra={"all_succeeded": True})
        else:
            failed = [k for k, v in result.per_task_outcomes.items() if v == "failure"]
            logger.warning(
                "poll_cycle_completed",
                extra={"all_succeeded": False, "failed_metrics": failed},
            )

        for listener in list(self._cycle_listeners):
            listener(result)
