"""The mountable dashboard: store, fetch tasks, poll cycles and animation wired together."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from meeting_dashboard.core.config import settings
from meeting_dashboard.core.logger import get_logger
from meeting_dashboard.core.scheduler import AsyncioScheduler, Scheduler
from meeting_dashboard.domain.models import (
    DashboardState,
    MetricDisplay,
    MetricSnapshot,
    PollCycleResult,
)
from meeting_dashboard.infrastructure.http.client import BackendClient
from meeting_dashboard.services.fetch_tasks import FetchTaskSet
from meeting_dashboard.services.metric_store import MetricStore
from meeting_dashboard.services.notifications import Notifier
from meeting_dashboard.services.poll_aggregator import PollCycleAggregator
from meeting_dashboard.services.value_interpolator import ValueInterpolator
from shared.constants import MetricKeys

logger = get_logger("dashboard.view")

@dataclass(frozen=True)
class DashboardProfile:
    name: str
    poll_interval_ms: int
    animate: bool
    success_message: str


def profile_for(name: str) -> DashboardProfile:
    if name == "primary":
        return DashboardProfile(
            name="primary",
            poll_interval_ms=settings.primary_poll_interval_ms,
            animate=True,
            success_message="All metrics refreshed successfully",
        )
    if name == "print":
        return DashboardProfile(
            name="print",
            poll_interval_ms=settings.print_poll_interval_ms,
            animate=False,
            success_message="Meeting statistics updated successfully",
        )
    raise ValueError(f"Unknown dashboard profile: {name}")


def format_value(value: float, decimals: int, suffix: str = "") -> str:
    return f"{value:,.{decimals}f}{suffix}"


class DashboardView:
    """Runs autonomously once mounted.

    Needs only a bearer credential; ``refresh_now`` is the optional manual
    trigger. Unmounting cancels the poll timer and the frame loop, while
    requests already in flight are left to finish and then ignored.

    The attendance percentage is recomputed once per settled cycle rather
    than after each of its inputs lands.
    """

    def __init__(
        self,
        client: BackendClient,
        notifier: Notifier | None = None,
        profile: DashboardProfile | None = None,
        scheduler: Scheduler | None = None,
        credential: Optional[str] = None,
        single_flight: bool | None = None,
    ):
        self.profile = profile or profile_for(settings.dashboard_profile)
        self.scheduler = scheduler or AsyncioScheduler()
        self.notifier = notifier or Notifier()
        self.store = MetricStore(MetricKeys.fetched())
        self.tasks = FetchTaskSet(client, self.notifier, credential)
        self.aggregator = PollCycleAggregator(
            self.store,
            self.tasks,
            self.notifier,
            self.scheduler,
            poll_interval_ms=self.profile.poll_interval_ms,
            single_flight=(
                settings.poll_single_flight if single_flight is None else single_flight
            ),
            success_message=self.profile.success_message,
        )
        self.interpolator: Optional[ValueInterpolator] = None
        self._unsubscribe = None
        self._remove_cycle_listener = None
        self._settled_percentage = self.percentage()
        self.mounted = False

    def mount(self, credential: Optional[str] = None):
        if self.mounted:
            return
        if credential is not None:
            self.tasks.set_credential(credential)
        if self.profile.animate:
            self.interpolator = ValueInterpolator(
                self.scheduler,
                duration_ms=settings.animation_duration_ms,
                frame_interval_ms=settings.animation_frame_interval_ms,
            )
            for key in MetricKeys.fetched():
                self.interpolator.seed(key, self.store.get(key).current_value)
            self.interpolator.seed(
                MetricKeys.ATTENDANCE_PERCENTAGE, self._settled_percentage
            )
            self._unsubscribe = self.store.subscribe(self._on_snapshot)
        self._remove_cycle_listener = self.aggregator.add_cycle_listener(
            self._on_cycle
        )
        self.mounted = True
        self.aggregator.start()
        logger.info(
            "dashboard_view_mounted",
            extra={
                "profile": self.profile.name,
                "poll_interval_ms": self.profile.poll_interval_ms,
                "has_credential": self.tasks.has_credential,
            },
        )

    def unmount(self):
        if not self.mounted:
            return
        self.aggregator.stop()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._remove_cycle_listener is not None:
            self._remove_cycle_listener()
            self._remove_cycle_listener = None
        if self.interpolator is not None:
            self.interpolator.close()
        self.mounted = False
        logger.info("dashboard_view_unmounted", extra={"profile": self.profile.name})

    def set_credential(self, credential: Optional[str]):
        self.tasks.set_credential(credential)
        logger.info(
            "dashboard_credential_changed",
            extra={"has_credential": self.tasks.has_credential},
        )

    def refresh_now(self) -> Optional[asyncio.Task]:
        return self.aggregator.trigger(source="manual")

    def percentage(self) -> float:
        return self.store.derive(
            MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL,
            over=MetricKeys.TOTAL_SUBSCRIBED_CAPITAL,
        )

    def _on_snapshot(self, key: str, snapshot: MetricSnapshot):
        if self.interpolator is None:
            return
        self.interpolator.retarget(key, snapshot.current_value)

    def _on_cycle(self, result: PollCycleResult):
        self.recompute_derived()

    def recompute_derived(self) -> float:
        """Recompute the percentage from the store as it stands now."""
        self._settled_percentage = self.percentage()
        if self.interpolator is not None:
            self.interpolator.retarget(
                MetricKeys.ATTENDANCE_PERCENTAGE, self._settled_percentage
            )
        return self._settled_percentage

    def _target(self, key: str) -> float:
        if key == MetricKeys.ATTENDANCE_PERCENTAGE:
            return self._settled_percentage
        return self.store.get(key).current_value

    def state(self, now: float | None = None) -> DashboardState:
        displays = {}
        for key in MetricKeys.displayed():
            target = self._target(key)
            if self.interpolator is not None:
                value = self.interpolator.displayed(key, now)
            else:
                value = target
            is_pct = key == MetricKeys.ATTENDANCE_PERCENTAGE
            decimals = 2 if is_pct else 0
            displays[key] = MetricDisplay(
                key=key,
                value=value,
                target=target,
                decimals=decimals,
                text=format_value(value, decimals, "%" if is_pct else ""),
            )
        return DashboardState(
            profile=self.profile.name,
            poll_interval_ms=self.profile.poll_interval_ms,
            status=self.aggregator.status,
            last_updated_at=self.aggregator.last_success_at,
            displays=displays,
            snapshots=self.store.snapshots(),
        )
