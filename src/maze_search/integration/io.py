"""Maze file I/O.

Three formats are supported, chosen by file suffix:

- ``.json``: ``{"cells": [[...]]}`` with codes or cell type names, a bare
  nested list, or a list of ASCII rows
- ``.txt`` / ``.maze``: ASCII rows, ``#`` wall, ``.`` free, ``S`` start, ``G`` goal
- ``.npy``: the raw int8 array
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union
import numpy as np

from maze_search.core.data_models import InvalidMazeError
from maze_search.core.grid import MazeGrid

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = ('.txt', '.maze')


def _grid_from_json(data: Any) -> MazeGrid:
    if isinstance(data, dict):
        if 'cells' not in data:
            raise InvalidMazeError("JSON maze object needs a 'cells' entry")
        data = data['cells']
    if not isinstance(data, list) or not data:
        raise InvalidMazeError("JSON maze must be a non-empty list of rows")
    if all(isinstance(row, str) for row in data):
        return MazeGrid.from_strings(data)
    if not all(isinstance(row, list) for row in data):
        raise InvalidMazeError("JSON maze rows must all be lists or all be strings")
    return MazeGrid.from_lists(data)


def load_maze(path: Union[str, Path]) -> MazeGrid:
    """Load a maze from disk.

    Args:
        path: Maze file

    Returns:
        Loaded grid

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidMazeError: If the content is not a valid maze
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Maze file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == '.npy':
            grid = MazeGrid(np.load(path, allow_pickle=False))
        elif suffix == '.json':
            with open(path, 'r') as f:
                grid = _grid_from_json(json.load(f))
        else:
            with open(path, 'r') as f:
                grid = MazeGrid.from_strings(f.read().splitlines())
    except InvalidMazeError:
        raise
    except (ValueError, TypeError, OverflowError) as e:
        raise InvalidMazeError(f"Malformed maze file {path}: {e}")

    logger.info(f"Loaded {grid.rows}x{grid.cols} maze from {path}")
    return grid


def maze_to_dict(grid: MazeGrid) -> Dict[str, Any]:
    return {'rows': grid.rows, 'cols': grid.cols, 'cells': grid.to_lists()}


def save_maze(grid: MazeGrid, path: Union[str, Path]) -> Path:
    """Save a maze; the format follows the file suffix (text when unknown).

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    suffix = path.suffix.lower()
    if suffix == '.npy':
        np.save(path, grid.cells)
    elif suffix == '.json':
        with open(path, 'w') as f:
            json.dump(maze_to_dict(grid), f)
    else:
        with open(path, 'w') as f:
            f.write(str(grid) + '\n')

    logger.info(f"Saved {grid.rows}x{grid.cols} maze to {path}")
    return path
