"""Iterative deepening A*.

Depth-first probes bounded by f = g + h, with the bound raised after each
probe to the smallest f that exceeded it. Only the current path is checked
for cycles, so memory stays proportional to the path depth. Optimal with the
admissible Manhattan heuristic.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple

from maze_search.core.data_models import Algorithm, Position
from maze_search.core.grid import MazeGrid, manhattan_distance
from maze_search.search.base import SearchEngine, SearchOutcome


@dataclass
class _Frame:
    position: Position
    g: int
    neighbors: Iterator[Position]
    min_exceeded: float = math.inf


class IDAStarSearch(SearchEngine):
    """IDA* with an explicit probe stack.

    ``exploration_order`` lists each position the first time any probe
    expands it. Re-expansions in later iterations are counted in
    ``stats['total_expansions']``.
    """

    algorithm = Algorithm.IDA_STAR
    is_optimal = True

    def _search(self, grid: MazeGrid, start: Position, goal: Position) -> SearchOutcome:
        self._grid = grid
        self._goal = goal
        self._seen: Set[Position] = set()
        self._exploration_order: List[Position] = []
        self._total_expansions = 0

        bound: float = manhattan_distance(start, goal)
        iterations = 0

        while True:
            iterations += 1
            threshold, path = self._probe(start, bound)
            if path is not None:
                return self._outcome(True, path, iterations, bound)
            if threshold == math.inf:
                # Every reachable simple path fits under the bound and none hit the goal
                return self._outcome(False, [], iterations, bound)
            bound = threshold

    def _outcome(self, found: bool, path: List[Position], iterations: int, bound: float) -> SearchOutcome:
        return SearchOutcome(found, path, self._exploration_order, {
            'iterations': iterations,
            'total_expansions': self._total_expansions,
            'final_bound': bound,
        })

    def _expand(self, position: Position) -> None:
        self._total_expansions += 1
        if position not in self._seen:
            self._seen.add(position)
            self._exploration_order.append(position)

    def _probe(self, start: Position, bound: float) -> Tuple[float, Optional[List[Position]]]:
        """One bounded depth-first probe.

        Returns:
            (threshold, path): the path when the goal was reached, otherwise
            the minimum f that exceeded ``bound`` (inf if none did)
        """
        f = manhattan_distance(start, self._goal)
        if f > bound:
            return f, None

        self._expand(start)
        if start == self._goal:
            return f, [start]

        path = [start]
        on_path = {start}
        stack = [_Frame(start, 0, iter(self._grid.neighbors(start)))]

        while stack:
            frame = stack[-1]
            descended = False

            for neighbor in frame.neighbors:
                if neighbor in on_path:
                    continue
                g = frame.g + 1
                f = g + manhattan_distance(neighbor, self._goal)
                if f > bound:
                    frame.min_exceeded = min(frame.min_exceeded, f)
                    continue

                self._expand(neighbor)
                if neighbor == self._goal:
                    return f, path + [neighbor]

                path.append(neighbor)
                on_path.add(neighbor)
                stack.append(_Frame(neighbor, g, iter(self._grid.neighbors(neighbor))))
                descended = True
                break

            if descended:
                continue

            stack.pop()
            path.pop()
            on_path.discard(frame.position)
            if stack:
                stack[-1].min_exceeded = min(stack[-1].min_exceeded, frame.min_exceeded)
            else:
                return frame.min_exceeded, None

        return math.inf, None
