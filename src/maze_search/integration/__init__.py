"""Maze file I/O."""

from .io import load_maze, maze_to_dict, save_maze

__all__ = [
    'load_maze',
    'maze_to_dict',
    'save_maze'
]
