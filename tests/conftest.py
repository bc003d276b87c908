"""Shared fixtures for the maze search test suite."""

import pytest

from maze_search.config import reset_config
from maze_search.core.grid import MazeGrid
from maze_search.generation.maze_generator import create_empty_maze


@pytest.fixture(autouse=True)
def clear_global_config():
    """Keep configuration loaded by one test from leaking into the next."""
    yield
    reset_config()


@pytest.fixture
def open_grid():
    """5x5 grid, border walls, free 3x3 interior, Start (1,1), Goal (3,3)."""
    return create_empty_maze(5, 5)


@pytest.fixture
def enclosed_goal_grid():
    """Goal at (3,3) surrounded by walls."""
    return MazeGrid.from_strings([
        "#####",
        "#S..#",
        "#..##",
        "#.#G#",
        "#####",
    ])


