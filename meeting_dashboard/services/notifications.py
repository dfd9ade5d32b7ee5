from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, List, Literal

from meeting_dashboard.core.config import settings
from meeting_dashboard.core.logger import get_logger
from meeting_dashboard.domain.models import Notification
from meeting_dashboard.infrastructure.metrics import NOTIFICATIONS_TOTAL

logger = get_logger("dashboard.notifications")


class Notifier:
    """Keeps the most recent user-facing notifications for the console."""

    def __init__(
        self,
        history_size: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._history: Deque[Notification] = deque(
            maxlen=history_size or settings.notification_history_size
        )
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def notify(
        self,
        title: str,
        description: str,
        variant: Literal["default", "destructive"] = "default",
    ) -> Notification:
        note = Notification(
            title=title,
            description=description,
            variant=variant,
            created_at=self._clock(),
        )
        self._history.append(note)
        NOTIFICATIONS_TOTAL.labels(variant=variant).inc()
        logger.info(
            "notification_emitted",
            extra={"title": title, "description": description, "variant": variant},
        )
        return note

    def fetch_failed(self, label: str) -> Notification:
        return self.notify(
            "Data Update Failed", f"Could not fetch {label}", variant="destructive"
        )

    def auth_missing(self) -> Notification:
        return self.notify(
            "Authentication Error",
            "No token found. Please log in again.",
            variant="destructive",
        )

    def refreshed(self, description: str) -> Notification:
        return self.notify("Data Updated", description)

    def recent(self, limit: int | None = None) -> List[Notification]:
        items = list(self._history)
        if limit is not None:
            items = items[-limit:] if limit > 0 else []
        return items
