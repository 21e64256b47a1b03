"""Fixed-timestep simulation clock driven by a variable-rate frame source."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snake_core.engine import GameEngine
    from snake_core.snapshot import GameSnapshot

logger = logging.getLogger(__name__)

RenderHook = Callable[["GameSnapshot"], None]


class GameLoop:
    """Accumulator loop decoupling frame rate from simulation rate.

    Call :meth:`frame` from the external frame callback with a timestamp
    in milliseconds. Every frame first advances the speed tween, which is
    frozen while the session is not ticking. It then runs as many movement
    ticks as the accumulated time allows and invokes the render hook once.
    """

    def __init__(
        self,
        engine: GameEngine,
        render_hook: RenderHook | None = None,
        max_ticks_per_frame: int | None = None,
    ) -> None:
        if max_ticks_per_frame is not None and max_ticks_per_frame < 1:
            raise ValueError("max_ticks_per_frame must be at least 1.")
        self.engine = engine
        self.render_hook = render_hook
        self.max_ticks_per_frame = max_ticks_per_frame
        self.accumulator = 0.0
        self.frames = 0
        self._last_time: float | None = None

    def reset_clock(self) -> None:
        """Forget the previous frame time and any accumulated backlog."""
        self._last_time = None
        self.accumulator = 0.0

    def frame(self, now: float) -> int:
        """Process one external frame. Returns the movement ticks run."""
        engine = self.engine
        elapsed = 0.0
        if self._last_time is not None:
            elapsed = max(0.0, now - self._last_time)
        self._last_time = now

        if engine.session.is_ticking:
            engine.speed.tween(now)
        else:
            # The tween is frozen while paused, in the overlay or after game over.
            engine.speed.hold(elapsed)

        self.accumulator += elapsed

        ticks = 0
        # The interval is re-read each pass: eating food inside tick() retargets it.
        while self.accumulator >= engine.speed.current_interval:
            if (
                self.max_ticks_per_frame is not None
                and ticks >= self.max_ticks_per_frame
            ):
                logger.debug(
                    "Dropping %.1f ms of backlog after %d ticks.",
                    self.accumulator, ticks,
                )
                self.accumulator = 0.0
                break
            if not engine.session.is_ticking:
                # Paused, overlay or game over: time passes but nothing moves.
                self.accumulator %= engine.speed.current_interval
                break
            if engine.tick(now):
                ticks += 1
            self.accumulator -= engine.speed.current_interval

        self.frames += 1
        if self.render_hook is not None:
            self.render_hook(engine.snapshot())
        return ticks
