"""Step-synchronised replay of independently computed search traces.

All results are computed before replay starts. The replay walks a shared
tick counter: at tick t every result contributes the t-th entry of its
exploration order, all contributions are merged into the ownership map, and
only then is the frame for tick t emitted. After the last tick the path of
the primary result is overlaid, unless no algorithm ever reached the goal.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple, Union
import numpy as np

from maze_search.core.data_models import (
    Algorithm, AlgorithmResult, CellType, InvalidComparisonError, Position
)
from maze_search.core.grid import MazeGrid
from maze_search.comparison.ownership import CellState, OwnershipMap, combined_colors

logger = logging.getLogger(__name__)

# Preference order for the path overlay
PRIMARY_PREFERENCE = (Algorithm.ASTAR, Algorithm.IDA_STAR)


@dataclass
class ReplayFrame:
    """Visualization delta for one tick."""
    tick: int
    updates: Dict[Position, CellState] = field(default_factory=dict)
    arrivals: Dict[Algorithm, int] = field(default_factory=dict)
    final: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tick': self.tick,
            'final': self.final,
            'updates': [
                {'row': pos.row, 'col': pos.col, 'state': state.value}
                for pos, state in self.updates.items()
            ],
            'arrivals': {a.display_name: step for a, step in self.arrivals.items()},
        }


def select_primary(results: Sequence[AlgorithmResult]) -> Optional[AlgorithmResult]:
    """Pick the result whose path is overlaid: A*, then IDA*, then any optimal one, then the first."""
    if not results:
        return None
    by_algorithm = {r.algorithm: r for r in results}
    for algorithm in PRIMARY_PREFERENCE:
        if algorithm in by_algorithm:
            return by_algorithm[algorithm]
    for result in results:
        if result.is_optimal:
            return result
    return results[0]


class ComparisonReplay:
    """Merge N exploration traces onto one discrete clock."""

    def __init__(self,
                 results: Sequence[AlgorithmResult],
                 goal: Tuple[int, int],
                 grid: Optional[MazeGrid] = None,
                 primary: Optional[Union[Algorithm, AlgorithmResult]] = None):
        """Initialize the replay.

        Args:
            results: Results computed on the same grid, start and goal
            goal: Goal position
            grid: Grid used to keep Start/Goal cells out of the overlay; when
                omitted the goal and each trace's first position are treated as endpoints
            primary: Algorithm or result whose path is drawn at the end
        """
        if not results:
            raise InvalidComparisonError("A comparison needs at least one result")
        algorithms = [r.algorithm for r in results]
        if len(set(algorithms)) != len(algorithms):
            names = [a.display_name for a in algorithms]
            raise InvalidComparisonError(f"Duplicate algorithms in comparison: {names}")

        self.results = list(results)
        self.goal = Position(*goal)
        self.grid = grid
        self.primary = self._resolve_primary(primary)
        self.max_steps = max(len(r.exploration_order) for r in self.results)
        # Single runs use the generic explored state
        self.single = len(self.results) == 1

        self.ownership = OwnershipMap()
        self.arrival_steps: Dict[Algorithm, int] = {}
        self.current_tick = 0
        self._states: Dict[Position, CellState] = {}
        self._endpoints = self._find_endpoints()

    def _resolve_primary(self, primary: Optional[Union[Algorithm, AlgorithmResult]]) -> Optional[AlgorithmResult]:
        if primary is None:
            return select_primary(self.results)
        if isinstance(primary, AlgorithmResult):
            return primary
        for result in self.results:
            if result.algorithm == Algorithm.parse(primary):
                return result
        raise InvalidComparisonError(f"Primary algorithm {primary!r} is not part of this comparison")

    def _find_endpoints(self) -> Set[Position]:
        if self.grid is not None:
            cells = self.grid.cells
            mask = (cells == CellType.START) | (cells == CellType.GOAL)
            return {Position(int(r), int(c)) for r, c in np.argwhere(mask)}
        endpoints = {self.goal}
        endpoints.update(r.exploration_order[0] for r in self.results if r.exploration_order)
        return endpoints

    # --- Replay ---------------------------------------------------------

    def step(self, tick: int) -> ReplayFrame:
        """Merge every algorithm's contribution for ``tick`` and return the frame."""
        frame = ReplayFrame(tick=tick)
        changed: List[Position] = []

        for result in self.results:
            if tick >= len(result.exploration_order):
                continue
            position = result.exploration_order[tick]
            if self.ownership.claim(position, result.algorithm):
                changed.append(position)
            # First arrival wins
            if position == self.goal and result.algorithm not in self.arrival_steps:
                self.arrival_steps[result.algorithm] = tick
                frame.arrivals[result.algorithm] = tick

        for position in changed:
            if position in self._endpoints:
                continue
            state = CellState.EXPLORED if self.single else self.ownership.state(position)
            self._states[position] = state
            frame.updates[position] = state

        self.current_tick = tick + 1
        return frame

    def path_overlay(self) -> Optional[ReplayFrame]:
        """Final frame drawing the primary path; None when no algorithm reached the goal."""
        if not self.arrival_steps:
            logger.info("No algorithm reached the goal; skipping path overlay")
            return None

        frame = ReplayFrame(tick=self.max_steps, final=True)
        if self.primary is not None:
            for position in self.primary.path:
                if position in self._endpoints:
                    continue
                self._states[position] = CellState.PATH
                frame.updates[position] = CellState.PATH
        return frame

    def frames(self) -> Iterator[ReplayFrame]:
        """Yield one frame per tick, then the path overlay frame if any goal was reached."""
        for tick in range(self.current_tick, self.max_steps):
            yield self.step(tick)
        overlay = self.path_overlay()
        if overlay is not None:
            yield overlay

    def run(self) -> List[ReplayFrame]:
        """Replay without pacing and return all frames."""
        return list(self.frames())

    # --- Derived state --------------------------------------------------

    def cell_state(self, position: Tuple[int, int]) -> CellState:
        return self._states.get(Position(*position), CellState.UNEXPLORED)

    def cell_colors(self, position: Tuple[int, int]) -> Tuple[str, ...]:
        return combined_colors(self.ownership.mask(Position(*position)))

    def cell_states(self, rows: Optional[int] = None, cols: Optional[int] = None) -> List[List[CellState]]:
        """Full matrix snapshot of the current visual state."""
        if rows is None or cols is None:
            if self.grid is None:
                raise ValueError("rows and cols are required when the replay has no grid")
            rows, cols = self.grid.shape
        matrix = [[CellState.UNEXPLORED] * cols for _ in range(rows)]
        for position, state in self._states.items():
            matrix[position.row][position.col] = state
        return matrix

    def steps_to_goal(self, result: AlgorithmResult) -> int:
        """Arrival tick, or the full trace length when the goal was never reached."""
        return self.arrival_steps.get(result.algorithm, len(result.exploration_order))

    def normalize_timings(self, total_seconds: float) -> List[AlgorithmResult]:
        """Replace raw computation time with the replay-relative time to goal.

        Args:
            total_seconds: Wall-clock duration of the whole replay

        Returns:
            Copies of the results with ``time_taken`` and ``steps_to_goal`` set
        """
        normalized = []
        for result in self.results:
            steps = self.steps_to_goal(result)
            visual_time = (steps / self.max_steps) * total_seconds if self.max_steps else 0.0
            normalized.append(result.with_timing(visual_time, steps))
        return normalized


def aggregate(results: Sequence[AlgorithmResult],
              goal: Tuple[int, int],
              grid: Optional[MazeGrid] = None) -> Tuple[List[ReplayFrame], Dict[Algorithm, int]]:
    """Replay results without pacing.

    Returns:
        (frames, arrival_steps)
    """
    replay = ComparisonReplay(results, goal, grid)
    frames = replay.run()
    return frames, dict(replay.arrival_steps)
