"""Tests for the Snake module."""

import pytest

from snake_core.snake import Direction, Snake


class TestDirection:
    def test_components(self):
        assert (Direction.UP.dx, Direction.UP.dy) == (0, -1)
        assert (Direction.RIGHT.dx, Direction.RIGHT.dy) == (1, 0)

    def test_exactly_one_component_nonzero(self):
        for d in Direction:
            assert abs(d.dx) + abs(d.dy) == 1

    def test_opposites(self):
        assert Direction.UP.opposite == Direction.DOWN
        assert Direction.DOWN.opposite == Direction.UP
        assert Direction.LEFT.opposite == Direction.RIGHT
        assert Direction.RIGHT.opposite == Direction.LEFT

    def test_from_name(self):
        assert Direction.from_name("up") == Direction.UP
        assert Direction.from_name(" Left ") == Direction.LEFT

    def test_from_name_unknown(self):
        with pytest.raises(ValueError, match="Unknown direction"):
            Direction.from_name("sideways")


class TestSnakeInit:
    def test_default_creation(self):
        snake = Snake(5, 5)
        assert snake.head == (5, 5)
        assert len(snake) == 3

    def test_body_extends_opposite_to_direction(self):
        snake = Snake(5, 5, Direction.RIGHT, length=3)
        assert list(snake.body) == [(5, 5), (4, 5), (3, 5)]

    def test_body_extends_down_when_moving_up(self):
        snake = Snake(5, 5, Direction.UP, length=3)
        assert list(snake.body) == [(5, 5), (5, 6), (5, 7)]

    def test_minimum_length(self):
        with pytest.raises(ValueError, match="at least 1"):
            Snake(0, 0, length=0)


class TestSnakeBody:
    def test_push_and_pop(self):
        snake = Snake(5, 5, Direction.RIGHT, length=3)
        snake.push_head((6, 5))
        assert snake.head == (6, 5)
        assert snake.pop_tail() == (3, 5)
        assert snake.body[-1] == (4, 5)
        assert len(snake) == 3

