"""Search algorithms for the maze demonstrator.

Five interchangeable engines share one neighbour contract and one result
record: DFS and BFS (uninformed), A*, Weighted A* and IDA* (Manhattan
heuristic).
"""

from .base import SearchEngine, SearchOutcome, reconstruct_path
from .uninformed import DepthFirstSearch, BreadthFirstSearch
from .astar import AStarSearch, WeightedAStarSearch, OpenSet, create_astar_searcher
from .ida_star import IDAStarSearch
from .registry import ENGINE_CLASSES, create_search_engine, run_algorithm, run_algorithms

__all__ = [
    'SearchEngine',
    'SearchOutcome',
    'reconstruct_path',
    'DepthFirstSearch',
    'BreadthFirstSearch',
    'AStarSearch',
    'WeightedAStarSearch',
    'OpenSet',
    'create_astar_searcher',
    'IDAStarSearch',
    'ENGINE_CLASSES',
    'create_search_engine',
    'run_algorithm',
    'run_algorithms'
]
