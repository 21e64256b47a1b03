"""Toroidal grid representation for the snake game."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_core.snake import Direction

Cell = tuple[int, int]


class CellType(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


class Grid:
    """NumPy-backed square grid whose edges wrap around.

    The grid stores cell states as integers for O(1) collision checks.
    Coordinates are ``(x, y)``; the backing array is indexed ``[y, x]``.
    """

    def __init__(self, size: int = 20) -> None:
        if size < 4:
            raise ValueError("Grid size must be at least 4.")
        self.size = size
        self.cells = np.zeros((size, size), dtype=np.int8)

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = CellType.EMPTY

    def wrap(self, x: int, y: int) -> Cell:
        """Wrap coordinates around the grid edges."""
        return (x + self.size) % self.size, (y + self.size) % self.size

    def step(self, cell: Cell, direction: Direction) -> Cell:
        """Return the neighbour of *cell* in *direction*, wrapping at edges."""
        return self.wrap(cell[0] + direction.dx, cell[1] + direction.dy)

    def get(self, x: int, y: int) -> CellType:
        """Return the cell type at the given coordinate."""
        return CellType(self.cells[y, x])

    def set(self, x: int, y: int, cell_type: CellType) -> None:
        """Set the cell type at the given coordinate."""
        self.cells[y, x] = cell_type

    def empty_cells(self) -> list[Cell]:
        """Return a list of all empty cell coordinates."""
        ys, xs = np.where(self.cells == CellType.EMPTY)
        return list(zip(xs.tolist(), ys.tolist(), strict=True))

    @property
    def area(self) -> int:
        return self.size * self.size

