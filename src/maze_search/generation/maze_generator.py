"""Deterministic maze generation.

Mazes are carved by randomized recursive backtracking over the odd-coordinate
room lattice, which yields a perfect maze (a spanning tree over rooms). A
fraction of the remaining walls is then opened to create alternative routes,
so that the search strategies have something to disagree about.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, TypeVar
import numpy as np

from maze_search.core.data_models import CellType
from maze_search.core.grid import GRID_DTYPE, MazeGrid

logger = logging.getLogger(__name__)

T = TypeVar('T')

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2 ** 31

DEFAULT_LOOP_FRACTION = 0.08
ATTEMPTS_PER_OPENING = 5

# Room-to-room steps: Up, Down, Left, Right (two cells, skipping the wall between)
ROOM_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-2, 0), (2, 0), (0, -2), (0, 2))


class LinearCongruentialGenerator:
    """Seedable PRNG producing a reproducible float stream in [0, 1).

    state' = (state * 1103515245 + 12345) mod 2**31, output = state' / 2**31.
    Arithmetic is exact, so a seed fixes the stream on every platform.
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.randrange(LCG_MODULUS)
        self.seed = int(seed)
        self.state = self.seed

    def next_state(self) -> int:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state

    def random(self) -> float:
        return self.next_state() / LCG_MODULUS

    def randbelow(self, n: int) -> int:
        """Integer in [0, n) derived from one float draw."""
        return int(self.random() * n)

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Fisher-Yates shuffle returning a new list."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            result[i], result[j] = result[j], result[i]
        return result


def _odd_dimension(n: int) -> int:
    return n - 1 if n % 2 == 0 else n


def carve_perfect_maze(rows: int, cols: int, rng: LinearCongruentialGenerator) -> np.ndarray:
    """Carve a perfect maze starting from room (1, 1).

    Uses an explicit stack of (room, remaining directions) frames; the order
    of carving and of PRNG draws is the same as the recursive formulation.

    Args:
        rows: Number of rows (already odd)
        cols: Number of columns (already odd)
        rng: Generator consumed once per shuffle

    Returns:
        Grid array with carved passages marked FREE
    """
    cells = np.full((rows, cols), int(CellType.WALL), dtype=GRID_DTYPE)
    visited = set()

    def enter(room: Tuple[int, int]) -> Tuple[Tuple[int, int], List[Tuple[int, int]]]:
        visited.add(room)
        cells[room] = CellType.FREE
        return room, rng.shuffle(ROOM_DIRECTIONS)

    stack = [enter((1, 1))]
    while stack:
        room, directions = stack[-1]
        if not directions:
            stack.pop()
            continue
        dr, dc = directions.pop(0)
        nxt = (room[0] + dr, room[1] + dc)
        if 0 <= nxt[0] < rows and 0 <= nxt[1] < cols and nxt not in visited:
            cells[room[0] + dr // 2, room[1] + dc // 2] = CellType.FREE
            stack.append(enter(nxt))

    return cells


def open_extra_walls(cells: np.ndarray,
                     rng: LinearCongruentialGenerator,
                     loop_fraction: float = DEFAULT_LOOP_FRACTION) -> int:
    """Open additional wall cells to create loops.

    A wall is opened only if 2 or 3 of its 4 neighbours are already free, so
    no fully open 2x2 pocket appears. Attempts are capped at five times the
    target so the loop always terminates.

    Returns:
        Number of walls opened
    """
    rows, cols = cells.shape
    if rows < 5 or cols < 5:
        return 0

    walls_to_open = int(rows * cols * loop_fraction)
    max_attempts = walls_to_open * ATTEMPTS_PER_OPENING
    opened = 0
    attempts = 0

    while opened < walls_to_open and attempts < max_attempts:
        row = 2 + rng.randbelow(rows - 4)
        col = 2 + rng.randbelow(cols - 4)

        if cells[row, col] == CellType.WALL:
            adjacent_free = sum(
                1 for r, c in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1))
                if cells[r, c] == CellType.FREE
            )
            if 2 <= adjacent_free <= 3:
                cells[row, col] = CellType.FREE
                opened += 1
        attempts += 1

    return opened


def generate_maze(rows: int, cols: int,
                  seed: Optional[int] = None,
                  loop_fraction: float = DEFAULT_LOOP_FRACTION) -> MazeGrid:
    """Generate a maze with Start at (1, 1) and Goal at (rows-2, cols-2).

    Args:
        rows: Requested rows (decremented if even)
        cols: Requested columns (decremented if even)
        seed: Optional seed; the same (rows, cols, seed) always yields the same grid
        loop_fraction: Fraction of all cells to try to open after carving

    Returns:
        Generated MazeGrid
    """
    actual_rows = _odd_dimension(rows)
    actual_cols = _odd_dimension(cols)
    rng = LinearCongruentialGenerator(seed)

    cells = carve_perfect_maze(actual_rows, actual_cols, rng)
    opened = open_extra_walls(cells, rng, loop_fraction)

    cells[1, 1] = CellType.START
    cells[actual_rows - 2, actual_cols - 2] = CellType.GOAL

    logger.info(f"Generated {actual_rows}x{actual_cols} maze (seed={rng.seed}, extra openings={opened})")
    return MazeGrid(cells)


def create_empty_maze(rows: int, cols: int) -> MazeGrid:
    """Border walls only, free interior, Start at (1, 1) and Goal at (rows-2, cols-2)."""
    cells = np.full((rows, cols), int(CellType.FREE), dtype=GRID_DTYPE)
    cells[0, :] = CellType.WALL
    cells[rows - 1, :] = CellType.WALL
    cells[:, 0] = CellType.WALL
    cells[:, cols - 1] = CellType.WALL
    cells[1, 1] = CellType.START
    cells[rows - 2, cols - 2] = CellType.GOAL
    return MazeGrid(cells)


def create_simple_maze() -> MazeGrid:
    """Fixed 15x25 corridor maze used as a predictable fixture."""
    rows, cols = 15, 25
    grid = create_empty_maze(rows, cols)
    for i in range(2, rows - 2, 2):
        for j in range(2, cols - 2):
            if 2 * j != cols:
                grid.cells[i, j] = CellType.WALL
    return grid


@dataclass
class MazeGenerator:
    """Maze generator bound to a configured size and loop fraction."""

    rows: int = 21
    cols: int = 41
    loop_fraction: float = DEFAULT_LOOP_FRACTION
    default_seed: Optional[int] = None

    def generate(self, seed: Optional[int] = None) -> MazeGrid:
        return generate_maze(self.rows, self.cols, seed, self.loop_fraction)

    def initial(self) -> MazeGrid:
        """Maze shown at start-up, reproducible when a default seed is configured."""
        return self.generate(self.default_seed)

    def empty(self) -> MazeGrid:
        return create_empty_maze(self.rows, self.cols)


def create_maze_generator(config: Optional[Any] = None) -> MazeGenerator:
    """Factory function creating a generator from the ``maze`` config section.

    Args:
        config: Full configuration, its ``maze`` section, or None for defaults

    Returns:
        Configured MazeGenerator
    """
    if config is None:
        return MazeGenerator()

    maze_cfg = config.get('maze', config)
    return MazeGenerator(
        rows=int(maze_cfg.get('rows', 21)),
        cols=int(maze_cfg.get('cols', 41)),
        loop_fraction=float(maze_cfg.get('loop_fraction', DEFAULT_LOOP_FRACTION)),
        default_seed=maze_cfg.get('seed', None),
    )
