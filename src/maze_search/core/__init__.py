"""Core grid model and data types."""

from .data_models import (
    Algorithm, AlgorithmResult, CellType, EditMode, FrontierNode, InvalidComparisonError, InvalidMazeError,
    MazeSearchError, Position, RunCancelledError, SearchNode, UnknownAlgorithmError,
    SELECTABLE_ALGORITHMS, SINGLE_ALGORITHMS
)
from .grid import MazeGrid, DIRECTIONS, manhattan_distance, are_adjacent

__all__ = [
    'Algorithm',
    'AlgorithmResult',
    'CellType',
    'EditMode',
    'FrontierNode',
    'InvalidComparisonError',
    'InvalidMazeError',
    'MazeSearchError',
    'Position',
    'RunCancelledError',
    'SearchNode',
    'UnknownAlgorithmError',
    'SELECTABLE_ALGORITHMS',
    'SINGLE_ALGORITHMS',
    'MazeGrid',
    'DIRECTIONS',
    'manhattan_distance',
    'are_adjacent'
]
