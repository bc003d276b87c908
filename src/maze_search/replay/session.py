"""Single-writer maze session.

The session owns the grid, the per-cell visualization state and the latest
results. A single ``is_running`` flag gates every mutating action: while a
replay is in progress edits and new runs are refused rather than queued.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence, Union

from maze_search.comparison.aggregator import ComparisonReplay, ReplayFrame
from maze_search.comparison.ownership import CellState
from maze_search.core.data_models import (
    Algorithm, AlgorithmResult, EditMode, InvalidComparisonError, RunCancelledError
)
from maze_search.core.grid import MazeGrid
from maze_search.generation.maze_generator import MazeGenerator, create_maze_generator
from maze_search.replay.driver import FrameCallback, ReplayDriver, speed_to_interval
from maze_search.search.registry import run_algorithms

logger = logging.getLogger(__name__)

DEFAULT_COMPARISON = (Algorithm.DFS, Algorithm.BFS, Algorithm.ASTAR)
DEFAULT_SPEED = 50


class MazeSession:
    """Grid, visualization state and results behind one running gate."""

    def __init__(self,
                 generator: Optional[MazeGenerator] = None,
                 grid: Optional[MazeGrid] = None,
                 speed: int = DEFAULT_SPEED,
                 comparison: Optional[Sequence[Union[Algorithm, str]]] = None,
                 primary: Optional[Union[Algorithm, str]] = None,
                 driver: Optional[ReplayDriver] = None):
        """Initialize the session.

        Args:
            generator: Maze generator used by ``regenerate`` and ``clear``
            grid: Initial grid; defaults to the generator's initial maze
            speed: Replay speed in [1, 100]
            comparison: Default algorithms for ``run_comparison``
            primary: Algorithm whose path is overlaid after a comparison
            driver: Replay driver; a private one is created when omitted
        """
        self.generator = generator or MazeGenerator()
        self.grid = grid if grid is not None else self.generator.initial()
        self.speed = speed
        self.comparison = tuple(Algorithm.parse(a) for a in (comparison or DEFAULT_COMPARISON))
        self.primary = Algorithm.parse(primary) if primary is not None else None
        self.driver = driver or ReplayDriver()

        self.cell_states: List[List[CellState]] = self._blank_states()
        self.results: List[AlgorithmResult] = []
        self.replay: Optional[ComparisonReplay] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def interval(self) -> float:
        return speed_to_interval(self.speed)

    def _blank_states(self) -> List[List[CellState]]:
        return [[CellState.UNEXPLORED] * self.grid.cols for _ in range(self.grid.rows)]

    def _refuse(self, action: str) -> bool:
        if self._running:
            logger.warning(f"Ignoring {action} while a run is in progress")
            return True
        return False

    # --- Mutations ------------------------------------------------------

    def edit(self, row: int, col: int, mode: Union[EditMode, str] = EditMode.TOGGLE_WALL) -> bool:
        """Apply one edit at (row, col) and clear the visualization.

        Returns:
            True if the grid changed
        """
        if self._refuse('edit'):
            return False
        mode = EditMode(mode)
        position = (row, col)
        if not self.grid.in_bounds(position):
            logger.warning(f"Edit at {position} is outside the grid")
            return False

        if mode == EditMode.TOGGLE_WALL:
            changed = self.grid.toggle_wall(position)
        elif mode == EditMode.SET_START:
            self.grid.set_start(position)
            changed = True
        else:
            self.grid.set_goal(position)
            changed = True

        if changed:
            self.reset_visualization()
        return changed

    def regenerate(self, seed: Optional[int] = None) -> bool:
        if self._refuse('regenerate'):
            return False
        self.grid = self.generator.generate(seed)
        self.reset_visualization()
        return True

    def clear(self) -> bool:
        """Replace the grid with an empty bordered one."""
        if self._refuse('clear'):
            return False
        self.grid = self.generator.empty()
        self.reset_visualization()
        return True

    def load(self, grid: MazeGrid) -> bool:
        if self._refuse('load'):
            return False
        self.grid = grid
        self.reset_visualization()
        return True

    def reset_visualization(self) -> bool:
        if self._refuse('reset'):
            return False
        self.cell_states = self._blank_states()
        self.results = []
        self.replay = None
        return True

    def set_speed(self, speed: int) -> None:
        # Read when the next run starts
        self.speed = speed

    # --- Runs -----------------------------------------------------------

    async def run_single(self, algorithm: Union[Algorithm, str],
                         on_frame: Optional[FrameCallback] = None) -> Optional[AlgorithmResult]:
        """Run one algorithm and replay its exploration.

        Returns:
            The result with replay timing, or None if a run is already active

        Raises:
            InvalidMazeError: If the grid lacks a Start or Goal cell
            RunCancelledError: If the replay is cancelled before it finishes
        """
        results = await self._run([Algorithm.parse(algorithm)], on_frame, primary=None)
        return results[0] if results else None

    async def run_comparison(self, algorithms: Optional[Iterable[Union[Algorithm, str]]] = None,
                             on_frame: Optional[FrameCallback] = None) -> Optional[List[AlgorithmResult]]:
        """Run several algorithms and replay them on one shared clock.

        Returns:
            Results with replay-relative timing, or None if a run is already active

        Raises:
            InvalidMazeError: If the grid lacks a Start or Goal cell
            InvalidComparisonError: If no algorithm is selected or one is listed twice
            RunCancelledError: If the replay is cancelled before it finishes
        """
        selected = [Algorithm.parse(a) for a in algorithms] if algorithms is not None else list(self.comparison)
        if not selected:
            raise InvalidComparisonError("Select at least one algorithm to compare")
        if len(set(selected)) != len(selected):
            names = ', '.join(a.display_name for a in selected)
            raise InvalidComparisonError(f"Each algorithm can be compared once, got: {names}")
        primary = self.primary if self.primary in selected else None
        return await self._run(selected, on_frame, primary)

    async def _run(self, algorithms: List[Algorithm], on_frame: Optional[FrameCallback],
                   primary: Optional[Algorithm]) -> Optional[List[AlgorithmResult]]:
        if self._refuse('run'):
            return None
        start, goal = self.grid.require_endpoints()

        self._running = True
        try:
            await self.driver.cancel()
            self.cell_states = self._blank_states()
            self.results = []
            names = ', '.join(a.display_name for a in algorithms)
            logger.info(f"Starting run: {names} from {tuple(start)} to {tuple(goal)}")
            results = run_algorithms(algorithms, self.grid, start, goal)

            replay = ComparisonReplay(results, goal, self.grid, primary)
            self.replay = replay

            def apply(frame: ReplayFrame):
                for position, state in frame.updates.items():
                    self.cell_states[position.row][position.col] = state
                if on_frame is not None:
                    return on_frame(frame)
                return None

            elapsed = await self.driver.play(replay.frames(), apply, self.interval)
            if elapsed is None:
                logger.info("Run cancelled before the replay finished")
                raise RunCancelledError("Run cancelled before the replay finished")

            self.results = replay.normalize_timings(elapsed)
            logger.info(f"Run finished in {elapsed:.2f}s")
            return list(self.results)
        finally:
            self._running = False

    async def cancel(self) -> bool:
        return await self.driver.cancel()

    # --- Views ----------------------------------------------------------

    def state_dict(self) -> dict:
        """JSON-friendly snapshot of grid, visualization and results."""
        return {
            'rows': self.grid.rows,
            'cols': self.grid.cols,
            'cells': self.grid.to_lists(),
            'cell_states': [[state.value for state in row] for row in self.cell_states],
            'is_running': self._running,
            'speed': self.speed,
            'results': [result.to_dict() for result in self.results],
        }


def create_session(config: Optional[Any] = None) -> MazeSession:
    """Factory function building a session from the full configuration.

    Args:
        config: Configuration with ``maze``, ``search`` and ``replay`` sections, or None

    Returns:
        Configured MazeSession
    """
    if config is None:
        return MazeSession()

    search_cfg = config.get('search', {}) or {}
    comparison_cfg = search_cfg.get('comparison', {}) or {}
    replay_cfg = config.get('replay', {}) or {}
    algorithms = list(comparison_cfg.get('algorithms', [])) or None
    return MazeSession(
        generator=create_maze_generator(config),
        speed=int(replay_cfg.get('speed', DEFAULT_SPEED)),
        comparison=algorithms,
        primary=comparison_cfg.get('primary', None),
    )
