"""Grid model and shared geometry helpers.

The grid is a rectangular numpy array of ``CellType`` codes. Edit operations
keep the one-Start/one-Goal invariant by clearing the previous occurrence
before placing the new one.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union
import numpy as np

from maze_search.core.data_models import CellType, InvalidMazeError, Position

logger = logging.getLogger(__name__)

# Up, Down, Left, Right. Neighbour order is observable through tie-breaks.
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

GRID_DTYPE = np.int8


def manhattan_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Manhattan distance, admissible and consistent on a 4-connected unit grid."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def are_adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    """True when two positions are 4-neighbours."""
    return manhattan_distance(a, b) == 1


class MazeGrid:
    """Rectangular matrix of cell types with maze-editing operations."""

    def __init__(self, cells: Union[np.ndarray, Sequence[Sequence[int]]]):
        array = np.array(cells, dtype=GRID_DTYPE)
        if array.ndim != 2 or array.shape[0] == 0 or array.shape[1] == 0:
            raise InvalidMazeError(f"Grid must be a non-empty 2D array, got shape {array.shape}")
        valid_codes = [int(c) for c in CellType]
        if not np.isin(array, valid_codes).all():
            raise InvalidMazeError("Grid contains unknown cell codes")
        self.cells = array

    # --- Construction ---------------------------------------------------

    @classmethod
    def filled(cls, rows: int, cols: int, cell_type: CellType = CellType.WALL) -> 'MazeGrid':
        return cls(np.full((rows, cols), int(cell_type), dtype=GRID_DTYPE))

    @classmethod
    def from_lists(cls, rows: Sequence[Sequence[Union[int, str, CellType]]]) -> 'MazeGrid':
        """Build a grid from nested lists of codes or cell type names."""
        converted = []
        for row in rows:
            converted_row = []
            for value in row:
                if isinstance(value, str):
                    try:
                        converted_row.append(int(CellType[value.upper()]))
                    except KeyError:
                        raise InvalidMazeError(f"Unknown cell type name: {value!r}")
                else:
                    converted_row.append(int(value))
            converted.append(converted_row)
        if len({len(r) for r in converted}) > 1:
            raise InvalidMazeError("Grid rows have inconsistent lengths")
        return cls(converted)

    @classmethod
    def from_strings(cls, lines: Iterable[str]) -> 'MazeGrid':
        """Parse the ASCII form: '#' wall, '.' free, 'S' start, 'G' goal."""
        rows = [[int(CellType.from_symbol(ch)) for ch in line.strip()] for line in lines if line.strip()]
        if not rows:
            raise InvalidMazeError("Empty maze text")
        if len({len(r) for r in rows}) > 1:
            raise InvalidMazeError("Maze lines have inconsistent lengths")
        return cls(rows)

    def copy(self) -> 'MazeGrid':
        return MazeGrid(self.cells.copy())

    # --- Inspection -----------------------------------------------------

    @property
    def rows(self) -> int:
        return int(self.cells.shape[0])

    @property
    def cols(self) -> int:
        return int(self.cells.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def in_bounds(self, pos: Tuple[int, int]) -> bool:
        return 0 <= pos[0] < self.rows and 0 <= pos[1] < self.cols

    def _check_bounds(self, pos: Tuple[int, int]) -> None:
        if not self.in_bounds(pos):
            raise InvalidMazeError(f"Position {tuple(pos)} is outside a {self.rows}x{self.cols} grid")

    def cell(self, pos: Tuple[int, int]) -> CellType:
        self._check_bounds(pos)
        return CellType(int(self.cells[pos[0], pos[1]]))

    def is_wall(self, pos: Tuple[int, int]) -> bool:
        self._check_bounds(pos)
        return self.cells[pos[0], pos[1]] == CellType.WALL

    def count(self, cell_type: CellType) -> int:
        return int(np.count_nonzero(self.cells == int(cell_type)))

    def find_positions(self) -> Tuple[Optional[Position], Optional[Position]]:
        """Locate the Start and Goal cells (first occurrence in row-major order)."""
        start = goal = None
        starts = np.argwhere(self.cells == CellType.START)
        goals = np.argwhere(self.cells == CellType.GOAL)
        if len(starts):
            start = Position(int(starts[0][0]), int(starts[0][1]))
        if len(goals):
            goal = Position(int(goals[0][0]), int(goals[0][1]))
        return start, goal

    def require_endpoints(self) -> Tuple[Position, Position]:
        """Return (start, goal) or raise InvalidMazeError if either is missing."""
        start, goal = self.find_positions()
        if start is None or goal is None:
            missing = [name for name, pos in (('start', start), ('goal', goal)) if pos is None]
            raise InvalidMazeError(f"Start or goal position not found (missing: {', '.join(missing)})")
        return start, goal

    def neighbors(self, pos: Tuple[int, int]) -> List[Position]:
        """4-connected, bounds-checked, non-wall neighbours in Up, Down, Left, Right order."""
        row, col = pos
        result = []
        for dr, dc in DIRECTIONS:
            nr, nc = row + dr, col + dc
            if 0 <= nr < self.rows and 0 <= nc < self.cols and self.cells[nr, nc] != CellType.WALL:
                result.append(Position(nr, nc))
        return result

    # --- Editing --------------------------------------------------------

    def toggle_wall(self, pos: Tuple[int, int]) -> bool:
        """Flip Wall/Free. Start and Goal cells are left untouched.

        Raises:
            InvalidMazeError: If the position is outside the grid
        """
        current = self.cell(pos)
        if current in (CellType.START, CellType.GOAL):
            return False
        self.cells[pos[0], pos[1]] = CellType.FREE if current == CellType.WALL else CellType.WALL
        return True

    def set_start(self, pos: Tuple[int, int]) -> None:
        self._move_endpoint(CellType.START, pos)

    def set_goal(self, pos: Tuple[int, int]) -> None:
        self._move_endpoint(CellType.GOAL, pos)

    def _move_endpoint(self, cell_type: CellType, pos: Tuple[int, int]) -> None:
        self._check_bounds(pos)
        self.cells[self.cells == cell_type] = CellType.FREE
        self.cells[pos[0], pos[1]] = cell_type
        logger.debug(f"{cell_type.name.lower()} moved to {tuple(pos)}")

    # --- Conversion -----------------------------------------------------

    def to_lists(self) -> List[List[int]]:
        return self.cells.tolist()

    def to_strings(self) -> List[str]:
        return [''.join(CellType(int(c)).symbol for c in row) for row in self.cells]

    def tobytes(self) -> bytes:
        return self.cells.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MazeGrid):
            return NotImplemented
        return np.array_equal(self.cells, other.cells)

    def __repr__(self) -> str:
        return f"MazeGrid({self.rows}x{self.cols})"

    def __str__(self) -> str:
        return '\n'.join(self.to_strings())
