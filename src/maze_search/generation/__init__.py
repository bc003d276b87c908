"""Maze generation for the search demonstrator.

Seeded recursive-backtracking carver with post-hoc loop opening, plus blank
and fixed fixture mazes.
"""

from .maze_generator import (
    LinearCongruentialGenerator, MazeGenerator, carve_perfect_maze, create_empty_maze,
    create_maze_generator, create_simple_maze, generate_maze, open_extra_walls
)

__all__ = [
    'LinearCongruentialGenerator',
    'MazeGenerator',
    'carve_perfect_maze',
    'create_empty_maze',
    'create_maze_generator',
    'create_simple_maze',
    'generate_maze',
    'open_extra_walls'
]
