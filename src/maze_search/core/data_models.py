"""Core data models for the maze search demonstrator."""

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum, IntFlag
from typing import Any, Dict, List, NamedTuple, Optional, Tuple
import numpy as np


class MazeSearchError(Exception):
    """Base exception for maze search errors."""
    pass


class InvalidMazeError(MazeSearchError):
    """Raised when a grid is malformed or lacks a Start or Goal cell."""
    pass


class UnknownAlgorithmError(MazeSearchError, ValueError):
    """Raised when an algorithm identifier cannot be resolved."""
    pass


class InvalidComparisonError(MazeSearchError, ValueError):
    """Raised when a comparison lists no algorithms or repeats one."""
    pass


class RunCancelledError(MazeSearchError):
    """Raised by a run whose replay was cancelled before it finished."""
    pass


class Position(NamedTuple):
    """(row, col) position in the grid."""

    row: int
    col: int

    def to_dict(self) -> Dict[str, int]:
        return {'row': self.row, 'col': self.col}


class CellType(IntEnum):
    """Cell types stored in the grid array."""

    WALL = 0
    FREE = 1
    START = 2
    GOAL = 3

    @property
    def symbol(self) -> str:
        """ASCII symbol used by the text maze format."""
        return CELL_SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> 'CellType':
        try:
            return SYMBOL_CELLS[symbol]
        except KeyError:
            raise InvalidMazeError(f"Unknown cell symbol: {symbol!r}")


CELL_SYMBOLS = {
    CellType.WALL: '#',
    CellType.FREE: '.',
    CellType.START: 'S',
    CellType.GOAL: 'G',
}
SYMBOL_CELLS = {symbol: cell for cell, symbol in CELL_SYMBOLS.items()}


class Algorithm(IntFlag):
    """Search algorithm identifiers.

    Each identifier is a distinct bit so that the set of algorithms that
    explored a cell can be stored as a single integer mask.
    """

    DFS = 1
    BFS = 2
    ASTAR = 4
    WEIGHTED_ASTAR = 8
    IDA_STAR = 16

    @property
    def display_name(self) -> str:
        return ALGORITHM_NAMES[self]

    @classmethod
    def parse(cls, value: Any) -> 'Algorithm':
        """Resolve an algorithm from its display name, enum name or value."""
        if isinstance(value, Algorithm):
            return value
        if isinstance(value, int):
            try:
                algorithm = cls(value)
            except ValueError:
                raise UnknownAlgorithmError(f"Unknown algorithm: {value!r}")
            if algorithm not in SINGLE_ALGORITHMS:
                raise UnknownAlgorithmError(f"Not a single algorithm: {value!r}")
            return algorithm

        key = str(value).strip().lower().replace('-', '_').replace(' ', '_')
        if key in _ALGORITHM_ALIASES:
            return _ALGORITHM_ALIASES[key]
        raise UnknownAlgorithmError(f"Unknown algorithm: {value!r}")


ALGORITHM_NAMES = {
    Algorithm.DFS: 'DFS',
    Algorithm.BFS: 'BFS',
    Algorithm.ASTAR: 'A*',
    Algorithm.WEIGHTED_ASTAR: 'Weighted A*',
    Algorithm.IDA_STAR: 'IDA*',
}

# Single-bit members in declaration order
SINGLE_ALGORITHMS: Tuple[Algorithm, ...] = tuple(ALGORITHM_NAMES)

# Algorithms offered by the single-run control
SELECTABLE_ALGORITHMS: Tuple[Algorithm, ...] = (Algorithm.DFS, Algorithm.BFS, Algorithm.ASTAR)

_ALGORITHM_ALIASES: Dict[str, Algorithm] = {}
for _algorithm, _name in ALGORITHM_NAMES.items():
    _ALGORITHM_ALIASES[_name.lower().replace(' ', '_')] = _algorithm
    _ALGORITHM_ALIASES[_algorithm.name.lower()] = _algorithm
_ALGORITHM_ALIASES.update({
    'astar': Algorithm.ASTAR,
    'a_star': Algorithm.ASTAR,
    'weighted_a*': Algorithm.WEIGHTED_ASTAR,
    'wastar': Algorithm.WEIGHTED_ASTAR,
    'idastar': Algorithm.IDA_STAR,
    'ida_star': Algorithm.IDA_STAR,
})


class EditMode(Enum):
    """Edit mode for user interaction with the grid."""

    TOGGLE_WALL = 'toggle_wall'
    SET_START = 'set_start'
    SET_GOAL = 'set_goal'


@dataclass
class SearchNode:
    """Position plus back-reference used by DFS, BFS and IDA*."""

    position: Position
    parent: Optional[Position] = None


@dataclass
class FrontierNode:
    """Open-set entry for A* and Weighted A*."""

    position: Position
    g: int  # cost from start
    h: int  # heuristic estimate to goal
    f: float  # g + weight * h
    parent: Optional[Position] = None


@dataclass(frozen=True)
class AlgorithmResult:
    """Uniform result record produced by every search engine."""

    name: str
    algorithm: Algorithm
    found: bool
    path: Tuple[Position, ...]
    exploration_order: Tuple[Position, ...]
    nodes_expanded: int
    path_length: int
    time_taken: float  # seconds
    is_optimal: bool
    steps_to_goal: Optional[int] = None
    stats: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        """Validate result invariants."""
        assert self.nodes_expanded == len(self.exploration_order), (
            f"nodes_expanded {self.nodes_expanded} != len(exploration_order) {len(self.exploration_order)}"
        )
        if not self.found:
            assert not self.path and self.path_length == 0, "Unsuccessful result must have an empty path"

    def with_timing(self, time_taken: float, steps_to_goal: Optional[int] = None) -> 'AlgorithmResult':
        """Copy of this result with display timing overwritten."""
        return replace(self, time_taken=time_taken, steps_to_goal=steps_to_goal)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a JSON-serialisable dictionary."""
        return {
            'name': self.name,
            'algorithm': self.algorithm.name,
            'found': self.found,
            'path': [list(p) for p in self.path],
            'exploration_order': [list(p) for p in self.exploration_order],
            'nodes_expanded': self.nodes_expanded,
            'path_length': self.path_length,
            'time_taken': self.time_taken,
            'is_optimal': self.is_optimal,
            'steps_to_goal': self.steps_to_goal,
            'stats': dict(self.stats),
        }


# Type aliases for clarity
Grid = np.ndarray  # 2D int8 array of CellType codes
Path = List[Position]
