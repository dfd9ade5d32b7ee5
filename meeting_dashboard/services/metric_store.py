from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List

from meeting_dashboard.core.logger import get_logger
from meeting_dashboard.domain.errors import UnknownMetric
from meeting_dashboard.domain.models import MetricSnapshot

logger = get_logger("dashboard.metric_store")

SnapshotListener = Callable[[str, MetricSnapshot], None]


def percentage(numerator: float, divisor: float) -> float:
    if divisor == 0:
        return 0.0
    return numerator / divisor * 100


class MetricStore:
    """Single source of truth for metric snapshots.

    Only ``update`` mutates state. Each update swaps in a new immutable
    snapshot, so previous/current always move together.
    """

    def __init__(
        self,
        keys: Iterable[str] = (),
        clock: Callable[[], datetime] | None = None,
    ):
        self._snapshots: Dict[str, MetricSnapshot] = {}
        self._listeners: List[SnapshotListener] = []
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        for key in keys:
            self.register(key)

    @property
    def keys(self) -> List[str]:
        return list(self._snapshots)

    def register(self, key: str, initial: float = 0.0):
        if key in self._snapshots:
            return
        self._snapshots[key] = MetricSnapshot(
            previous_value=initial, current_value=initial
        )

    def get(self, key: str) -> MetricSnapshot:
        try:
            return self._snapshots[key]
        except KeyError:
            raise UnknownMetric(key) from None

    def update(self, key: str, new_value: float) -> MetricSnapshot:
        snapshot = self.get(key).advanced(new_value, self._clock())
        self._snapshots[key] = snapshot
        logger.debug(
            "metric_updated",
            extra={
                "metric": key,
                "previous_value": snapshot.previous_value,
                "current_value": snapshot.current_value,
            },
        )
        for listener in list(self._listeners):
            listener(key, snapshot)
        return snapshot

    def derive(self, percentage_of: str, over: str) -> float:
        """Percentage of ``percentage_of`` over ``over``; 0 for a zero divisor."""
        return percentage(
            self.get(percentage_of).current_value, self.get(over).current_value
        )

    def snapshots(self) -> Dict[str, MetricSnapshot]:
        return dict(self._snapshots)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
