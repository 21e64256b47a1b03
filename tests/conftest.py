"""Shared fixtures for engine-level tests."""

from __future__ import annotations

from collections import deque

import pytest

from snake_core.config import GameConfig
from snake_core.engine import GameEngine
from snake_core.events import RecordingListener
from snake_core.grid import CellType
from snake_core.snake import Direction


@pytest.fixture()
def recorder():
    return RecordingListener()


@pytest.fixture()
def engine(recorder):
    """A seeded, already-running engine on the default 20x20 grid."""
    eng = GameEngine(
        GameConfig(open_overlay_on_start=False),
        seed=0,
        clock=lambda: 0.0,
        listeners=[recorder],
    )
    eng.start()
    recorder.drain()
    return eng


@pytest.fixture()
def place():
    """Return a helper that rewrites the board of an engine in place."""

    def _place(engine, body, food=None, direction=Direction.RIGHT):
        engine.grid.clear()
        engine.snake.body = deque(body)
        for x, y in body:
            engine.grid.set(x, y, CellType.SNAKE)
        engine.direction = direction
        engine._pending_direction = direction
        engine.food_spawner.position = None
        engine.food = None
        if food is not None:
            engine.grid.set(food[0], food[1], CellType.FOOD)
            engine.food_spawner.position = food
            engine.food = food

    return _place


@pytest.fixture()
def feed():
    """Return a helper that puts food straight ahead and ticks *n* times."""

    def _feed(engine, n, now=0.0):
        for _ in range(n):
            ahead = engine.grid.step(engine.snake.head, engine._pending_direction)
            engine.food_spawner.clear()
            engine.grid.set(ahead[0], ahead[1], CellType.FOOD)
            engine.food_spawner.position = ahead
            engine.food = ahead
            assert engine.tick(now)

    return _feed
