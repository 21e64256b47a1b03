"""Read-only view of a session handed to render hooks and listeners."""

from __future__ import annotations

from dataclasses import dataclass

from snake_core.grid import Cell
from snake_core.session import SessionState


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable copy of everything the presentation layer draws."""

    snake: tuple[Cell, ...]
    food: Cell | None
    state: SessionState
    score: int
    high_score: int
    current_interval: float
    target_interval: float
    level: int
    tick: int
    grid_size: int
    cleared: bool = False

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def to_dict(self) -> dict:
        """Return the snapshot as a JSON-serializable dict."""
        return {
            "snake": [list(c) for c in self.snake],
            "food": list(self.food) if self.food is not None else None,
            "state": self.state.value,
            "score": self.score,
            "high_score": self.high_score,
            "current_interval": self.current_interval,
            "target_interval": self.target_interval,
            "level": self.level,
            "tick": self.tick,
            "grid_size": self.grid_size,
            "cleared": self.cleared,
        }
