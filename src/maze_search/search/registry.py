"""Lookup and batch execution of search engines by algorithm identifier."""

import logging
from typing import Any, Dict, Iterable, List, Tuple, Type, Union

from maze_search.core.data_models import Algorithm, AlgorithmResult, UnknownAlgorithmError
from maze_search.core.grid import MazeGrid
from maze_search.search.astar import AStarSearch, WeightedAStarSearch, create_astar_searcher
from maze_search.search.base import SearchEngine
from maze_search.search.ida_star import IDAStarSearch
from maze_search.search.uninformed import BreadthFirstSearch, DepthFirstSearch

logger = logging.getLogger(__name__)

ENGINE_CLASSES: Dict[Algorithm, Type[SearchEngine]] = {
    Algorithm.DFS: DepthFirstSearch,
    Algorithm.BFS: BreadthFirstSearch,
    Algorithm.ASTAR: AStarSearch,
    Algorithm.WEIGHTED_ASTAR: WeightedAStarSearch,
    Algorithm.IDA_STAR: IDAStarSearch,
}


def create_search_engine(algorithm: Union[Algorithm, str, int], **kwargs: Any) -> SearchEngine:
    """Factory function to create a search engine.

    Args:
        algorithm: Algorithm identifier, enum name or display name
        **kwargs: Engine options (``weight`` for Weighted A*; A* with a weight
            other than 1.0 becomes Weighted A*)

    Returns:
        Search engine instance

    Raises:
        UnknownAlgorithmError: If the algorithm cannot be resolved
    """
    algorithm = Algorithm.parse(algorithm)
    if algorithm == Algorithm.ASTAR and kwargs.get('weight') is not None:
        return create_astar_searcher(kwargs['weight'])
    try:
        engine_class = ENGINE_CLASSES[algorithm]
    except KeyError:
        raise UnknownAlgorithmError(f"No search engine registered for {algorithm!r}")
    return engine_class(**kwargs)


def run_algorithm(algorithm: Union[Algorithm, str],
                  grid: MazeGrid,
                  start: Tuple[int, int],
                  goal: Tuple[int, int],
                  **kwargs: Any) -> AlgorithmResult:
    """Create an engine and run it once."""
    return create_search_engine(algorithm, **kwargs).execute(grid, start, goal)


def run_algorithms(algorithms: Iterable[Union[Algorithm, str]],
                   grid: MazeGrid,
                   start: Tuple[int, int],
                   goal: Tuple[int, int]) -> List[AlgorithmResult]:
    """Run several engines on the same grid, start and goal, one after another.

    Every search completes before this returns; nothing is interleaved.
    """
    results = []
    for algorithm in algorithms:
        results.append(run_algorithm(algorithm, grid, start, goal))
    logger.info(f"Ran {len(results)} algorithms: "
                + ', '.join(f"{r.name} ({'found' if r.found else 'no path'})" for r in results))
    return results
