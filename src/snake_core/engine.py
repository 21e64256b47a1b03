"""Single-snake game engine composing grid, snake, food, speed and session."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

import numpy as np

from snake_core.config import GameConfig
from snake_core.events import (
    EventDispatcher,
    GameListener,
    HighScoreStore,
    InMemoryHighScoreStore,
)
from snake_core.food import FoodSpawner, GridFullError
from snake_core.grid import Cell, CellType, Grid
from snake_core.session import SessionState, SessionStateMachine
from snake_core.snake import Direction, Snake
from snake_core.snapshot import GameSnapshot
from snake_core.speed import SpeedController

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GameEngine:
    """Owns one play session and applies commands and ticks to it.

    Commands that are illegal in the current session state are ignored
    and return ``False``. Each call to :meth:`tick` advances the snake by
    one cell while the session is running.

    Times (``now``) are milliseconds on the same clock the game loop
    uses; when omitted they are read from *clock*.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        high_scores: HighScoreStore | None = None,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
        clock: Callable[[], float] | None = None,
        listeners: Iterable[GameListener] = (),
    ) -> None:
        self.config = config or GameConfig()
        self._pending_config: GameConfig | None = None
        self.events = EventDispatcher(listeners)
        self.high_scores: HighScoreStore = (
            high_scores if high_scores is not None else InMemoryHighScoreStore()
        )
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._clock = clock or _monotonic_ms

        self.session = SessionStateMachine(
            SessionState.OVERLAY
            if self.config.open_overlay_on_start else SessionState.IDLE,
        )
        self.speed = SpeedController(
            self.config.base_interval,
            self.config.start_length,
            self.config.curve,
            events=self.events,
        )
        self._reset()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def pending_direction(self) -> Direction:
        return self._pending_direction

    @property
    def high_score(self) -> int:
        return max(self.previous_high, self.score)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def request_direction(
        self, direction: Direction, now: float | None = None,
    ) -> bool:
        """Queue a turn for the next tick.

        Only accepted while running, at most once per cooldown window, and
        never as a 180° reversal of the active direction.
        """
        if not self.session.can_steer:
            logger.debug("Ignoring direction in state %s.", self.state.value)
            return False

        now = self._now(now)
        if (
            self._last_turn_time is not None
            and now - self._last_turn_time < self.config.direction_cooldown_ms
        ):
            return False

        if len(self.snake) > 1 and direction == self.direction.opposite:
            return False

        self._pending_direction = direction
        self._last_turn_time = now
        return True

    def start(self) -> bool:
        """Start from idle, or start over after a game over."""
        return self._transition(self.session.start)

    def toggle_pause(self) -> bool:
        return self._transition(self.session.toggle_pause)

    def open_overlay(self) -> bool:
        """Show the configuration overlay; ticking stops while it is open."""
        return self._transition(self.session.open_overlay)

    def confirm_overlay(self, config: GameConfig | None = None) -> bool:
        """Close the overlay, applying *config*.

        A live session resumes with its speed progress intact; only the
        display preferences take effect now and the rest of *config* is
        applied at the next reset. Otherwise the session starts over with
        *config*.
        """
        if not self.session.overlay_open:
            logger.debug("Ignoring confirm_overlay in state %s.", self.state.value)
            return False

        if config is not None:
            if self.session.resume_after_overlay:
                self.config = self.config.with_display(config)
                if config != self.config:
                    self._pending_config = config
            else:
                self.config = config
                self._pending_config = None
        return self._transition(self.session.confirm_overlay)

    def request_restart(self) -> bool:
        """Ask the presentation layer to confirm a restart."""
        self.events.on_restart_requested()
        return True

    def restart(self) -> bool:
        """Start a fresh session regardless of the current state."""
        return self._transition(self.session.restart)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self, now: float | None = None) -> bool:
        """Move the snake one cell. Returns ``True`` if a move was applied."""
        if not self.session.is_ticking:
            return False

        now = self._now(now)
        self.direction = self._pending_direction
        new_head = self.grid.step(self.snake.head, self.direction)

        # Any body cell counts, the tail included: the move is never applied.
        if self.grid.get(*new_head) == CellType.SNAKE:
            self._end_game()
            return False

        ate = new_head == self.food
        self.snake.push_head(new_head)
        self.grid.set(new_head[0], new_head[1], CellType.SNAKE)

        if ate:
            self.score += self.config.food_reward
            try:
                self.food = self._place_food()
            except GridFullError:
                self.food = None
                self.cleared = True
            self.speed.retarget(len(self.snake), now)
            self.events.on_eaten(self.score)
            if not self._record_announced and self.score > self.previous_high:
                self._record_announced = True
                self.events.on_new_record(self.score)
        else:
            tail_x, tail_y = self.snake.pop_tail()
            self.grid.set(tail_x, tail_y, CellType.EMPTY)

        self.tick_count += 1
        self.events.on_tick(self.snapshot())

        if self.cleared:
            logger.info("Board cleared at tick %d.", self.tick_count)
            self._end_game()
        return True

    def snapshot(self) -> GameSnapshot:
        """Return an immutable view of the session."""
        return GameSnapshot(
            snake=tuple(self.snake.body),
            food=self.food,
            state=self.state,
            score=self.score,
            high_score=self.high_score,
            current_interval=self.speed.current_interval,
            target_interval=self.speed.target_interval,
            level=self.speed.level,
            tick=self.tick_count,
            grid_size=self.grid.size,
            cleared=self.cleared,
        )

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        state = self.snapshot().to_dict()
        state["direction"] = list(self.direction.value)
        state.update(self.session.to_dict())
        state["speed"] = self.speed.to_dict()
        state["config"] = self.config.to_dict()
        return state

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _now(self, now: float | None) -> float:
        return self._clock() if now is None else now

    def _transition(self, command: Callable[[], bool]) -> bool:
        previous = self.session.state
        if not command():
            return False
        if self.session.needs_reset:
            self.session.needs_reset = False
            self._reset()
        if self.session.state != previous:
            self.events.on_state_changed(previous, self.session.state)
        return True

    def _reset(self) -> None:
        """Re-initialize snake, food, score and speed from the config."""
        if self._pending_config is not None:
            self.config = self._pending_config
            self._pending_config = None
        cfg = self.config

        self.grid = Grid(cfg.grid_size)
        center = cfg.grid_size // 2
        self.snake = Snake(center, center, Direction.RIGHT, length=cfg.start_length)
        for x, y in self.snake.body:
            self.grid.set(x, y, CellType.SNAKE)

        self.direction = Direction.RIGHT
        self._pending_direction = Direction.RIGHT
        self._last_turn_time: float | None = None

        self.score = 0
        self.tick_count = 0
        self.cleared = False
        self.previous_high = self.high_scores.get_high_score(cfg.profile)
        self._record_announced = False

        self.speed.reset(cfg.base_interval, cfg.curve, cfg.start_length)
        self.food_spawner = FoodSpawner(self.grid, rng=self.rng)
        self.food: Cell | None = self._place_food()

    def _place_food(self) -> Cell:
        cell = self.food_spawner.place()
        self.events.on_food_placed(cell)
        return cell

    def _end_game(self) -> None:
        """Freeze the session and settle the high score."""
        self._transition(self.session.game_over)
        is_record = self.score > self.previous_high
        if is_record:
            self.high_scores.set_high_score(self.config.profile, self.score)
        logger.info(
            "Game over at tick %d with score %d (record=%s).",
            self.tick_count, self.score, is_record,
        )
        self.events.on_game_over(self.score, is_record, self.previous_high)
