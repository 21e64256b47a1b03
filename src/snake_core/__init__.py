"""Snake Core: real-time snake simulation core."""

from snake_core.config import GameConfig, SpeedPreset
from snake_core.engine import GameEngine
from snake_core.events import (
    EventDispatcher,
    GameListener,
    HighScoreStore,
    InMemoryHighScoreStore,
    RecordingListener,
)
from snake_core.food import FoodSpawner, GridFullError
from snake_core.grid import Grid
from snake_core.loop import GameLoop
from snake_core.session import SessionState, SessionStateMachine
from snake_core.snake import Direction, Snake
from snake_core.snapshot import GameSnapshot
from snake_core.speed import SpeedController, SpeedCurve, compute_target_interval

__all__ = [
    "Direction",
    "EventDispatcher",
    "FoodSpawner",
    "GameConfig",
    "GameEngine",
    "GameListener",
    "GameLoop",
    "GameSnapshot",
    "Grid",
    "GridFullError",
    "HighScoreStore",
    "InMemoryHighScoreStore",
    "RecordingListener",
    "SessionState",
    "SessionStateMachine",
    "Snake",
    "SpeedController",
    "SpeedCurve",
    "SpeedPreset",
    "compute_target_interval",
]
