"""Softcap speed curve and tweened tick interval."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snake_core.events import GameListener

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeedCurve:
    """Parameters of the two-phase difficulty curve.

    Each food eaten up to *softcap_threshold* shortens the tick interval
    by *k1* ms; past the threshold each food only shortens it by *k2* ms.
    The interval never drops below *min_interval*.
    """

    softcap_threshold: int = 8
    k1: float = 8.0
    k2: float = 2.0
    min_interval: float = 60.0
    tween_duration: float = 300.0
    foods_per_level: int = 5
    max_level: int = 20

    def __post_init__(self) -> None:
        if self.softcap_threshold < 0:
            raise ValueError("softcap_threshold must be >= 0.")
        if self.k1 < 0 or self.k2 < 0:
            raise ValueError("k1 and k2 must be >= 0.")
        if self.k2 > self.k1:
            raise ValueError("k2 must not exceed k1.")
        if self.min_interval <= 0:
            raise ValueError("min_interval must be positive.")
        if self.tween_duration < 0:
            raise ValueError("tween_duration must be >= 0.")
        if self.foods_per_level < 1:
            raise ValueError("foods_per_level must be at least 1.")
        if self.max_level < 1:
            raise ValueError("max_level must be at least 1.")


def compute_target_interval(
    initial_interval: float,
    snake_length: int,
    start_length: int,
    curve: SpeedCurve,
) -> float:
    """Tick interval in ms for a snake of *snake_length* segments."""
    delta = max(0, snake_length - start_length)
    if delta <= curve.softcap_threshold:
        reduction = curve.k1 * delta
    else:
        reduction = (
            curve.k1 * curve.softcap_threshold
            + curve.k2 * (delta - curve.softcap_threshold)
        )
    return max(curve.min_interval, initial_interval - reduction)


def compute_level(snake_length: int, start_length: int, curve: SpeedCurve) -> int:
    """Displayed difficulty level, starting at 1."""
    delta = max(0, snake_length - start_length)
    return min(curve.max_level, delta // curve.foods_per_level + 1)


def ease_out_cubic(progress: float) -> float:
    return 1.0 - (1.0 - progress) ** 3


@dataclass
class SpeedState:
    """Active and target tick intervals plus the running tween, if any."""

    current_interval: float
    target_interval: float
    tween_start_time: float | None = None
    tween_from: float = 0.0

    @property
    def tweening(self) -> bool:
        return self.tween_start_time is not None


class SpeedController:
    """Derives the tick interval from snake length and eases toward it."""

    def __init__(
        self,
        initial_interval: float,
        start_length: int,
        curve: SpeedCurve | None = None,
        events: GameListener | None = None,
    ) -> None:
        self.curve = curve or SpeedCurve()
        self.start_length = start_length
        self._events = events
        self.initial_interval = initial_interval
        self.level = 1
        base = max(self.curve.min_interval, initial_interval)
        self.state = SpeedState(current_interval=base, target_interval=base)

    @property
    def current_interval(self) -> float:
        return self.state.current_interval

    @property
    def target_interval(self) -> float:
        return self.state.target_interval

    def reset(
        self,
        initial_interval: float | None = None,
        curve: SpeedCurve | None = None,
        start_length: int | None = None,
    ) -> None:
        """Snap back to the base interval and level 1, dropping any tween."""
        if initial_interval is not None:
            self.initial_interval = initial_interval
        if curve is not None:
            self.curve = curve
        if start_length is not None:
            self.start_length = start_length
        base = max(self.curve.min_interval, self.initial_interval)
        self.state = SpeedState(current_interval=base, target_interval=base)
        self.level = 1

    def retarget(self, snake_length: int, now: float) -> float:
        """Recompute the target for *snake_length* and start a tween.

        Emits ``on_level_changed`` when the derived level moves.
        """
        target = compute_target_interval(
            self.initial_interval, snake_length, self.start_length, self.curve,
        )
        if target != self.state.target_interval:
            self.state.tween_from = self.state.current_interval
            self.state.tween_start_time = now
            self.state.target_interval = target
            logger.debug(
                "Speed target %.1f ms -> %.1f ms (length %d).",
                self.state.current_interval, target, snake_length,
            )

        level = compute_level(snake_length, self.start_length, self.curve)
        if level != self.level:
            self.level = level
            if self._events is not None:
                self._events.on_level_changed(level)
        return target

    def tween(self, now: float) -> float:
        """Advance the running tween to *now* and return the interval."""
        state = self.state
        if state.tween_start_time is None:
            return state.current_interval

        duration = self.curve.tween_duration
        if duration <= 0:
            progress = 1.0
        else:
            progress = (now - state.tween_start_time) / duration
            progress = min(1.0, max(0.0, progress))

        if progress >= 1.0:
            state.current_interval = state.target_interval
            state.tween_start_time = None
            return state.current_interval

        eased = ease_out_cubic(progress)
        state.current_interval = (
            state.tween_from + (state.target_interval - state.tween_from) * eased
        )
        return state.current_interval

    def hold(self, elapsed: float) -> None:
        """Shift a running tween by *elapsed* ms so suspended time is skipped."""
        if self.state.tween_start_time is not None and elapsed > 0:
            self.state.tween_start_time += elapsed

    def to_dict(self) -> dict:
        return {
            "current_interval": self.state.current_interval,
            "target_interval": self.state.target_interval,
            "tweening": self.state.tweening,
            "level": self.level,
        }
