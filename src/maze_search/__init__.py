"""Maze search demonstrator.

Generates seeded grid mazes, runs DFS, BFS, A*, Weighted A* and IDA* on
them, and replays their exploration traces side by side on one clock.
"""

__version__ = "0.1.0"

from .core import Algorithm, AlgorithmResult, CellType, MazeGrid, Position
from .generation import generate_maze
from .search import create_search_engine, run_algorithm, run_algorithms
from .comparison import ComparisonReplay, aggregate
from .analysis import analyze_results

__all__ = [
    'Algorithm',
    'AlgorithmResult',
    'CellType',
    'MazeGrid',
    'Position',
    'generate_maze',
    'create_search_engine',
    'run_algorithm',
    'run_algorithms',
    'ComparisonReplay',
    'aggregate',
    'analyze_results'
]
