"""A* and Weighted A* search over the maze grid.

Both engines order the open set by f = g + weight * h with Manhattan distance
as h, breaking ties on the lower h. Weight 1.0 gives plain A*, which is optimal
because Manhattan distance is admissible and consistent on a 4-connected unit
grid. Larger weights trade optimality for fewer expansions; the returned path
is at most ``weight`` times the optimal length.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from maze_search.core.data_models import Algorithm, FrontierNode, Position
from maze_search.core.grid import MazeGrid, manhattan_distance
from maze_search.search.base import SearchEngine, SearchOutcome, reconstruct_path

logger = logging.getLogger(__name__)

DEFAULT_WEIGHT = 2.0


@dataclass
class SearchStatistics:
    """Open-set statistics for one heuristic search run."""
    nodes_generated: int = 0
    decrease_keys: int = 0
    max_open_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'nodes_generated': self.nodes_generated,
            'decrease_keys': self.decrease_keys,
            'max_open_size': self.max_open_size,
        }


class OpenSet:
    """Priority queue ordered by (f, h, sequence) with lazy deletion.

    The sequence number is assigned on insert and re-assigned on every
    decrease-key. This yields exactly the order a stable full re-sort of a
    list would give after each append or in-place update: an updated node
    moves behind the nodes that already share its new (f, h).
    """

    _REMOVED = object()

    def __init__(self):
        self._heap: List[list] = []
        self._entries: Dict[Position, list] = {}
        self._counter = itertools.count()

    def push(self, node: FrontierNode) -> None:
        entry = [node.f, node.h, next(self._counter), node]
        self._entries[node.position] = entry
        heapq.heappush(self._heap, entry)

    def update(self, node: FrontierNode) -> None:
        """Re-prioritise a node whose f has been lowered in place."""
        stale = self._entries.pop(node.position, None)
        if stale is not None:
            stale[-1] = self._REMOVED
        self.push(node)

    def pop(self) -> FrontierNode:
        while self._heap:
            entry = heapq.heappop(self._heap)
            node = entry[-1]
            if node is not self._REMOVED:
                del self._entries[node.position]
                return node
        raise KeyError('pop from an empty open set')

    def __contains__(self, position: Position) -> bool:
        return position in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


class AStarSearch(SearchEngine):
    """Best-first search on f = g + weight * h."""

    algorithm = Algorithm.ASTAR
    is_optimal = True

    def __init__(self, weight: float = 1.0):
        self.weight = float(weight)

    def _search(self, grid: MazeGrid, start: Position, goal: Position) -> SearchOutcome:
        stats = SearchStatistics()
        open_set = OpenSet()
        closed_set: Set[Position] = set()
        nodes: Dict[Position, FrontierNode] = {}
        exploration_order: List[Position] = []

        h = manhattan_distance(start, goal)
        start_node = FrontierNode(position=start, g=0, h=h, f=self.weight * h, parent=None)
        open_set.push(start_node)
        nodes[start] = start_node

        while open_set:
            current = open_set.pop()
            if current.position in closed_set:
                continue

            closed_set.add(current.position)
            exploration_order.append(current.position)

            if current.position == goal:
                parents = {pos: node.parent for pos, node in nodes.items()}
                return SearchOutcome(True, reconstruct_path(parents, goal), exploration_order,
                                     stats.to_dict())

            for neighbor in grid.neighbors(current.position):
                if neighbor in closed_set:
                    continue

                tentative_g = current.g + 1
                existing = nodes.get(neighbor)

                if existing is None:
                    h = manhattan_distance(neighbor, goal)
                    node = FrontierNode(position=neighbor, g=tentative_g, h=h,
                                        f=tentative_g + self.weight * h, parent=current.position)
                    nodes[neighbor] = node
                    open_set.push(node)
                    stats.nodes_generated += 1
                elif tentative_g < existing.g:
                    # Decrease-key in place
                    existing.g = tentative_g
                    existing.f = tentative_g + self.weight * existing.h
                    existing.parent = current.position
                    if neighbor in open_set:
                        open_set.update(existing)
                        stats.decrease_keys += 1

            stats.max_open_size = max(stats.max_open_size, len(open_set))

        return SearchOutcome(False, [], exploration_order, stats.to_dict())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(weight={self.weight})"


class WeightedAStarSearch(AStarSearch):
    """A* with an inflated heuristic; bounded suboptimality of ``weight``."""

    algorithm = Algorithm.WEIGHTED_ASTAR
    is_optimal = False

    def __init__(self, weight: Optional[float] = None):
        if weight is None:
            from maze_search.config import get_parameter
            weight = get_parameter('search.weighted_astar.weight', DEFAULT_WEIGHT)
        if weight < 1.0:
            raise ValueError(f"Weighted A* weight must be >= 1.0, got {weight}")
        super().__init__(weight)

    @property
    def name(self) -> str:
        return f"{self.algorithm.display_name} (ε={self.weight:g})"


def create_astar_searcher(weight: float = 1.0) -> AStarSearch:
    """Factory function returning plain A* for weight 1.0, Weighted A* otherwise.

    Args:
        weight: Heuristic inflation factor (>= 1.0)

    Returns:
        Configured A* engine
    """
    if weight == 1.0:
        return AStarSearch()
    return WeightedAStarSearch(weight)
