"""Value-object animation state for count-up transitions.

Everything here is a pure function of elapsed time so an animation can be
inspected at any instant without a rendering loop.
"""

from __future__ import annotations

from dataclasses import dataclass


def clamp_progress(elapsed_ms: float, duration_ms: float) -> float:
    if duration_ms <= 0:
        return 1.0
    return min(max(elapsed_ms / duration_ms, 0.0), 1.0)


def interpolate(from_value: float, to_value: float, progress: float) -> float:
    """Linear easing; progress 1 returns ``to_value`` exactly."""
    if progress >= 1.0:
        return to_value
    if progress <= 0.0:
        return from_value
    return from_value + (to_value - from_value) * progress


@dataclass(frozen=True)
class AnimationState:
    from_value: float
    to_value: float
    started_at: float  # monotonic seconds
    duration_ms: float

    def progress(self, now: float) -> float:
        return clamp_progress((now - self.started_at) * 1000.0, self.duration_ms)

    def value_at(self, now: float) -> float:
        return interpolate(self.from_value, self.to_value, self.progress(now))

    def is_complete(self, now: float) -> bool:
        return self.progress(now) >= 1.0

    def retarget(self, to_value: float, now: float) -> "AnimationState":
        """Abandon this animation for a new one starting where it is now."""
        return AnimationState(
            from_value=self.value_at(now),
            to_value=to_value,
            started_at=now,
            duration_ms=self.duration_ms,
        )
