"""Food placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from snake_core.grid import Cell, CellType

if TYPE_CHECKING:
    from snake_core.grid import Grid

logger = logging.getLogger(__name__)


class GridFullError(RuntimeError):
    """Raised when the snake covers every cell and no food can be placed."""


class FoodSpawner:
    """Places the single food item on a free grid cell.

    Cells are rejection-sampled uniformly with an injectable NumPy RNG so
    placement is reproducible from a seed. After *max_attempts* misses the
    spawner picks uniformly among the remaining empty cells, so placement
    terminates even on a crowded board.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = (
            max_attempts if max_attempts is not None else 4 * grid.area
        )
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0.")
        self.position: Cell | None = None

    def place(self) -> Cell:
        """Put the food on a random free cell and return it.

        Raises :class:`GridFullError` when the snake fills the grid.
        """
        self.clear()
        cell = self._sample()
        self.grid.set(cell[0], cell[1], CellType.FOOD)
        self.position = cell
        return cell

    def clear(self) -> None:
        """Remove the food from the grid, if it is still painted there."""
        if self.position is None:
            return
        x, y = self.position
        if self.grid.get(x, y) == CellType.FOOD:
            self.grid.set(x, y, CellType.EMPTY)
        self.position = None

    def _sample(self) -> Cell:
        size = self.grid.size
        for _ in range(self.max_attempts):
            x, y = (int(v) for v in self.rng.integers(size, size=2))
            if self.grid.get(x, y) == CellType.EMPTY:
                return x, y

        empty = self.grid.empty_cells()
        if not empty:
            logger.info("No empty cells left for food placement.")
            raise GridFullError("The grid is fully occupied by the snake.")
        return empty[int(self.rng.integers(len(empty)))]

