from datetime import datetime
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict

TaskOutcome = Literal["success", "failure"]
DashboardStatus = Literal["refreshing", "idle"]


class MetricSnapshot(BaseModel):
    """Previous/current value pair for one metric.

    Immutable: the store replaces the whole snapshot on every update so a
    reader never observes a half-applied transition.
    """

    model_config = ConfigDict(frozen=True)

    previous_value: float = 0.0
    current_value: float = 0.0
    last_updated_at: Optional[datetime] = None

    def advanced(self, new_value: float, at: datetime) -> "MetricSnapshot":
        return MetricSnapshot(
            previous_value=self.current_value,
            current_value=new_value,
            last_updated_at=at,
        )


class PollCycleResult(BaseModel):
    """Outcome of one poll cycle, built only after every task settled."""

    model_config = ConfigDict(frozen=True)

    per_task_outcomes: Dict[str, TaskOutcome]
    all_succeeded: bool
    completed_at: datetime

    @classmethod
    def from_outcomes(
        cls, outcomes: Dict[str, bool], completed_at: datetime
    ) -> "PollCycleResult":
        return cls(
            per_task_outcomes={
                key: "success" if ok else "failure" for key, ok in outcomes.items()
            },
            all_succeeded=bool(outcomes) and all(outcomes.values()),
            completed_at=completed_at,
        )


class Notification(BaseModel):
    """User-facing notification (a toast in the console UI)."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"
    created_at: datetime


class MetricDisplay(BaseModel):
    key: str
    value: float
    target: float
    decimals: int
    text: str


class DashboardState(BaseModel):
    """Read model served to whatever renders the dashboard."""

    profile: str
    poll_interval_ms: int
    status: DashboardStatus
    last_updated_at: Optional[datetime]
    displays: Dict[str, MetricDisplay]
    snapshots: Dict[str, MetricSnapshot]
