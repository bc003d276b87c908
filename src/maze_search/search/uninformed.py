"""Uninformed search: depth-first and breadth-first."""

from collections import deque
from typing import Dict, List, Optional, Set

from maze_search.core.data_models import Algorithm, Position, SearchNode
from maze_search.core.grid import MazeGrid
from maze_search.search.base import SearchEngine, SearchOutcome, reconstruct_path


class DepthFirstSearch(SearchEngine):
    """Stack-based DFS. Explores as deep as possible before backtracking.

    Never guaranteed to return the shortest path.
    """

    algorithm = Algorithm.DFS
    is_optimal = False

    def _search(self, grid: MazeGrid, start: Position, goal: Position) -> SearchOutcome:
        stack: List[SearchNode] = [SearchNode(start, None)]
        visited: Set[Position] = set()
        parents: Dict[Position, Optional[Position]] = {}
        exploration_order: List[Position] = []

        while stack:
            current = stack.pop()
            # A position can sit on the stack several times; only the first pop counts
            if current.position in visited:
                continue

            visited.add(current.position)
            parents[current.position] = current.parent
            exploration_order.append(current.position)

            if current.position == goal:
                return SearchOutcome(True, reconstruct_path(parents, goal), exploration_order)

            # Reverse so the first neighbour in scan order is popped first
            for neighbor in reversed(grid.neighbors(current.position)):
                if neighbor not in visited:
                    stack.append(SearchNode(neighbor, current.position))

        return SearchOutcome(False, [], exploration_order)


class BreadthFirstSearch(SearchEngine):
    """Queue-based BFS. Optimal on unit-cost grids."""

    algorithm = Algorithm.BFS
    is_optimal = True

    def _search(self, grid: MazeGrid, start: Position, goal: Position) -> SearchOutcome:
        queue = deque([SearchNode(start, None)])
        # Marked on enqueue so nothing is queued twice
        visited: Set[Position] = {start}
        parents: Dict[Position, Optional[Position]] = {}
        exploration_order: List[Position] = []

        while queue:
            current = queue.popleft()
            parents[current.position] = current.parent
            exploration_order.append(current.position)

            if current.position == goal:
                return SearchOutcome(True, reconstruct_path(parents, goal), exploration_order)

            for neighbor in grid.neighbors(current.position):
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(SearchNode(neighbor, current.position))

        return SearchOutcome(False, [], exploration_order)
