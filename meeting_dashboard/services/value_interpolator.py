from __future__ import annotations

from typing import Callable, Dict, Optional

from meeting_dashboard.core.logger import get_logger
from meeting_dashboard.core.scheduler import CancellationHandle, Scheduler
from meeting_dashboard.domain.animation import AnimationState

logger = get_logger("dashboard.value_interpolator")


class ValueInterpolator:
    """Animates each metric's displayed value towards its latest target.

    Animations are independent per key. Retargeting mid-flight restarts from
    the value currently on screen, so successive updates never jump. The
    frame loop only runs while at least one animation is in progress.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        duration_ms: float,
        frame_interval_ms: float,
        clock: Callable[[], float] | None = None,
    ):
        self.scheduler = scheduler
        self.duration_ms = duration_ms
        self.frame_interval_ms = frame_interval_ms
        self._clock = clock or scheduler.now
        self._displayed: Dict[str, float] = {}
        self._animations: Dict[str, AnimationState] = {}
        self._frame_handle: Optional[CancellationHandle] = None
        self._closed = False

    @property
    def animating(self) -> bool:
        return bool(self._animations)

    def animation(self, key: str) -> Optional[AnimationState]:
        return self._animations.get(key)

    def seed(self, key: str, value: float):
        """Set a displayed value without animating (initial state)."""
        self._animations.pop(key, None)
        self._displayed[key] = value

    def displayed(self, key: str, now: float | None = None) -> float:
        anim = self._animations.get(key)
        if anim is None:
            return self._displayed.get(key, 0.0)
        return anim.value_at(self._clock() if now is None else now)

    def target(self, key: str) -> float:
        anim = self._animations.get(key)
        if anim is None:
            return self._displayed.get(key, 0.0)
        return anim.to_value

    def retarget(self, key: str, to_value: float, now: float | None = None):
        if self._closed:
            return
        now = self._clock() if now is None else now
        anim = self._animations.get(key)
        if anim is not None:
            if anim.to_value == to_value:
                return
            self._animations[key] = anim.retarget(to_value, now)
            logger.debug(
                "animation_superseded",
                extra={"metric": key, "from_value": self._animations[key].from_value},
            )
        else:
            current = self._displayed.get(key, 0.0)
            if current == to_value:
                return
            self._animations[key] = AnimationState(
                from_value=current,
                to_value=to_value,
                started_at=now,
                duration_ms=self.duration_ms,
            )
        self._ensure_frame_loop()

    def tick(self, now: float | None = None) -> Dict[str, float]:
        """Advance every animation to ``now``; finished ones snap to their target."""
        now = self._clock() if now is None else now
        for key, anim in list(self._animations.items()):
            self._displayed[key] = anim.value_at(now)
            if anim.is_complete(now):
                del self._animations[key]
        if not self._animations:
            self._stop_frame_loop()
        return dict(self._displayed)

    def close(self):
        """Stop the frame loop and drop all transient animation state."""
        self._closed = True
        self._stop_frame_loop()
        self._animations.clear()
        logger.info("value_interpolator_closed")

    def _ensure_frame_loop(self):
        if self._frame_handle is None:
            self._frame_handle = self.scheduler.schedule(
                self.frame_interval_ms, self._on_frame
            )

    def _stop_frame_loop(self):
        if self._frame_handle is not None:
            self._frame_handle.cancel()
            self._frame_handle = None

    def _on_frame(self):
        self.tick()
