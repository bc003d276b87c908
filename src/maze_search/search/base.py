"""Shared contract for the grid search engines."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import numpy as np

from maze_search.core.data_models import Algorithm, AlgorithmResult, Position
from maze_search.core.grid import MazeGrid

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    """Raw output of one engine run before it is packaged as a result."""
    found: bool
    path: List[Position] = field(default_factory=list)
    exploration_order: List[Position] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)


def as_grid(grid: Union[MazeGrid, np.ndarray, list]) -> MazeGrid:
    """Accept a MazeGrid or anything MazeGrid can be built from."""
    if isinstance(grid, MazeGrid):
        return grid
    return MazeGrid(grid)


def reconstruct_path(parents: Mapping[Position, Optional[Position]], goal: Position) -> List[Position]:
    """Walk parent links from goal back to start and reverse."""
    path = []
    current: Optional[Position] = goal
    while current is not None:
        path.append(current)
        current = parents.get(current)
    path.reverse()
    return path


class SearchEngine(ABC):
    """Base class for the interchangeable search algorithms.

    Subclasses implement ``_search``; ``execute`` handles timing, packaging
    and logging so every engine returns the same result record.
    """

    algorithm: Algorithm
    is_optimal: bool = False

    @property
    def name(self) -> str:
        return self.algorithm.display_name

    def execute(self,
                grid: Union[MazeGrid, np.ndarray],
                start: Tuple[int, int],
                goal: Tuple[int, int]) -> AlgorithmResult:
        """Run the search from start to goal.

        Args:
            grid: Maze grid (walls block movement)
            start: Start position
            goal: Goal position

        Returns:
            AlgorithmResult; ``found=False`` with an empty path when no route exists
        """
        grid = as_grid(grid)
        start, goal = Position(*start), Position(*goal)

        start_time = time.perf_counter()
        outcome = self._search(grid, start, goal)
        time_taken = time.perf_counter() - start_time

        path = tuple(outcome.path) if outcome.found else ()
        result = AlgorithmResult(
            name=self.name,
            algorithm=self.algorithm,
            found=outcome.found,
            path=path,
            exploration_order=tuple(outcome.exploration_order),
            nodes_expanded=len(outcome.exploration_order),
            path_length=len(path) - 1 if path else 0,
            time_taken=time_taken,
            is_optimal=self.is_optimal,
            stats=outcome.stats,
        )

        logger.debug(f"{self.name}: found={result.found}, nodes_expanded={result.nodes_expanded}, "
                     f"path_length={result.path_length}, time={time_taken * 1000:.2f}ms")
        return result

    @abstractmethod
    def _search(self, grid: MazeGrid, start: Position, goal: Position) -> SearchOutcome:
        """Algorithm-specific search loop."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
