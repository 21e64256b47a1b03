"""Headless simulation runs for exercising the core and tuning the curve."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace

import numpy as np

from snake_core.config import GameConfig
from snake_core.engine import GameEngine
from snake_core.events import InMemoryHighScoreStore
from snake_core.loop import GameLoop
from snake_core.session import SessionState
from snake_core.snake import Direction
from snake_core.speed import compute_level, compute_target_interval

logger = logging.getLogger(__name__)

_DIRECTIONS: list[Direction] = list(Direction)


@dataclass
class SimulationResult:
    """Aggregate results of a batch of autopilot games."""

    games: int
    total_ticks: int
    total_frames: int
    best_score: int
    mean_score: float
    final_interval_min: float
    wall_time_seconds: float

    def summary(self) -> str:
        return (
            f"Simulated {self.games} game(s): {self.total_ticks} ticks over "
            f"{self.total_frames} frames in {self.wall_time_seconds:.2f}s | "
            f"best score {self.best_score}, mean {self.mean_score:.1f}, "
            f"fastest interval {self.final_interval_min:.1f} ms"
        )


def simulate_games(
    *,
    config: GameConfig | None = None,
    num_games: int = 10,
    frame_ms: float = 1000.0 / 60.0,
    max_frames: int = 20_000,
    turn_prob: float = 0.1,
    seed: int | None = 42,
) -> SimulationResult:
    """Play *num_games* games through :class:`GameLoop` with a fake clock.

    A seeded random autopilot requests a turn on roughly *turn_prob* of
    the frames. Each game ends at game over or after *max_frames* frames.
    """
    if num_games < 1:
        raise ValueError("num_games must be at least 1.")
    if frame_ms <= 0:
        raise ValueError("frame_ms must be positive.")

    cfg = replace(config or GameConfig(), open_overlay_on_start=False)
    rng = np.random.default_rng(seed)
    high_scores = InMemoryHighScoreStore()

    scores: list[int] = []
    total_ticks = 0
    total_frames = 0
    fastest = float("inf")
    start = time.perf_counter()

    for _ in range(num_games):
        now = 0.0
        engine = GameEngine(
            cfg,
            high_scores=high_scores,
            seed=int(rng.integers(2**31)),
            clock=lambda: now,
        )
        loop = GameLoop(engine)
        engine.start()

        for _ in range(max_frames):
            if rng.random() < turn_prob:
                direction = _DIRECTIONS[int(rng.integers(len(_DIRECTIONS)))]
                engine.request_direction(direction, now=now)
            total_ticks += loop.frame(now)
            total_frames += 1
            fastest = min(fastest, engine.speed.current_interval)
            if engine.state == SessionState.GAME_OVER:
                break
            now += frame_ms

        scores.append(engine.score)

    elapsed = time.perf_counter() - start
    result = SimulationResult(
        games=num_games,
        total_ticks=total_ticks,
        total_frames=total_frames,
        best_score=max(scores),
        mean_score=float(np.mean(scores)),
        final_interval_min=fastest,
        wall_time_seconds=elapsed,
    )
    logger.info(result.summary())
    return result


def curve_table(config: GameConfig, foods: int) -> list[tuple[int, float, int]]:
    """Rows of ``(foods_eaten, target_interval, level)`` for 0..*foods*."""
    rows = []
    for eaten in range(foods + 1):
        length = config.start_length + eaten
        rows.append((
            eaten,
            compute_target_interval(
                config.base_interval, length, config.start_length, config.curve,
            ),
            compute_level(length, config.start_length, config.curve),
        ))
    return rows
