"""Tests for the FoodSpawner module."""

import numpy as np
import pytest

from snake_core.food import FoodSpawner, GridFullError
from snake_core.grid import CellType, Grid


class TestFoodPlacement:
    def test_place_marks_grid(self):
        grid = Grid(size=5)
        spawner = FoodSpawner(grid, rng=np.random.default_rng(42))
        cell = spawner.place()
        assert spawner.position == cell
        assert grid.get(*cell) == CellType.FOOD

    def test_never_on_snake(self):
        grid = Grid(size=6)
        for x in range(6):
            for y in range(5):
                grid.set(x, y, CellType.SNAKE)
        spawner = FoodSpawner(grid, rng=np.random.default_rng(0))
        for _ in range(20):
            x, y = spawner.place()
            assert y == 5

    def test_replacing_moves_the_food(self):
        grid = Grid(size=5)
        spawner = FoodSpawner(grid, rng=np.random.default_rng(1))
        spawner.place()
        spawner.place()
        assert int(np.count_nonzero(grid.cells == CellType.FOOD)) == 1

    def test_deterministic_with_seed(self):
        a = FoodSpawner(Grid(10), rng=np.random.default_rng(7)).place()
        b = FoodSpawner(Grid(10), rng=np.random.default_rng(7)).place()
        assert a == b

    def test_fallback_after_attempts_exhausted(self):
        grid = Grid(size=4)
        grid.cells[:] = CellType.SNAKE
        grid.set(2, 3, CellType.EMPTY)
        spawner = FoodSpawner(grid, rng=np.random.default_rng(0), max_attempts=0)
        assert spawner.place() == (2, 3)

    def test_full_grid_raises(self):
        grid = Grid(size=4)
        grid.cells[:] = CellType.SNAKE
        spawner = FoodSpawner(grid, rng=np.random.default_rng(0))
        with pytest.raises(GridFullError):
            spawner.place()
        assert spawner.position is None

    def test_invalid_attempts(self):
        with pytest.raises(ValueError, match="max_attempts"):
            FoodSpawner(Grid(4), max_attempts=-1)


class TestFoodClear:
    def test_clear_leaves_snake_cells_alone(self):
        grid = Grid(size=5)
        spawner = FoodSpawner(grid, rng=np.random.default_rng(3))
        x, y = spawner.place()
        grid.set(x, y, CellType.SNAKE)
        spawner.clear()
        assert grid.get(x, y) == CellType.SNAKE
        assert spawner.position is None
