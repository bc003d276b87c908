"""Exploration ownership and the cell-state combination table.

Which algorithms have explored a cell is stored as an integer bit mask over
the ``Algorithm`` flags, so the combined visual state is a direct index into
a precomputed table.
"""

from enum import Enum
from typing import Dict, Iterator, Tuple

from maze_search.core.data_models import Algorithm, Position, SINGLE_ALGORITHMS


class CellState(Enum):
    """Visual state of a cell consumed by the renderer."""

    UNEXPLORED = 'unexplored'
    EXPLORED = 'explored'
    PATH = 'path'
    DFS_EXPLORED = 'dfs_explored'
    BFS_EXPLORED = 'bfs_explored'
    ASTAR_EXPLORED = 'astar_explored'
    WEIGHTED_ASTAR_EXPLORED = 'weighted_astar_explored'
    IDA_STAR_EXPLORED = 'ida_star_explored'
    DFS_BFS_EXPLORED = 'dfs_bfs_explored'
    DFS_ASTAR_EXPLORED = 'dfs_astar_explored'
    BFS_ASTAR_EXPLORED = 'bfs_astar_explored'
    ALL_EXPLORED = 'all_explored'
    MULTI_EXPLORED = 'multi_explored'


ALGORITHM_COLORS: Dict[Algorithm, str] = {
    Algorithm.DFS: '#f97316',
    Algorithm.BFS: '#3b82f6',
    Algorithm.ASTAR: '#22c55e',
    Algorithm.WEIGHTED_ASTAR: '#a855f7',
    Algorithm.IDA_STAR: '#eab308',
}

_SINGLE_STATES = {
    Algorithm.DFS: CellState.DFS_EXPLORED,
    Algorithm.BFS: CellState.BFS_EXPLORED,
    Algorithm.ASTAR: CellState.ASTAR_EXPLORED,
    Algorithm.WEIGHTED_ASTAR: CellState.WEIGHTED_ASTAR_EXPLORED,
    Algorithm.IDA_STAR: CellState.IDA_STAR_EXPLORED,
}

_COMBINED_STATES = {
    int(Algorithm.DFS | Algorithm.BFS): CellState.DFS_BFS_EXPLORED,
    int(Algorithm.DFS | Algorithm.ASTAR): CellState.DFS_ASTAR_EXPLORED,
    int(Algorithm.BFS | Algorithm.ASTAR): CellState.BFS_ASTAR_EXPLORED,
    int(Algorithm.DFS | Algorithm.BFS | Algorithm.ASTAR): CellState.ALL_EXPLORED,
}

MASK_LIMIT = 1 << len(SINGLE_ALGORITHMS)


def mask_owners(mask: int) -> Tuple[Algorithm, ...]:
    """Algorithms present in a mask, in declaration order."""
    return tuple(a for a in SINGLE_ALGORITHMS if mask & a)


def _state_for_mask(mask: int) -> CellState:
    owners = mask_owners(mask)
    if not owners:
        return CellState.UNEXPLORED
    if len(owners) == 1:
        return _SINGLE_STATES[owners[0]]
    return _COMBINED_STATES.get(mask, CellState.MULTI_EXPLORED)


# Indexed directly by ownership mask
COMBINATION_TABLE: Tuple[CellState, ...] = tuple(_state_for_mask(m) for m in range(MASK_LIMIT))

# Colour stops per mask: one colour, a two-stop blend, or one stop per owner
COLOR_TABLE: Tuple[Tuple[str, ...], ...] = tuple(
    tuple(ALGORITHM_COLORS[a] for a in mask_owners(m)) for m in range(MASK_LIMIT)
)


def combined_state(mask: int) -> CellState:
    return COMBINATION_TABLE[mask]


def combined_colors(mask: int) -> Tuple[str, ...]:
    return COLOR_TABLE[mask]


class OwnershipMap:
    """Position -> bit set of algorithms that explored it. Bits are never cleared."""

    def __init__(self):
        self._masks: Dict[Position, int] = {}

    def claim(self, position: Position, algorithm: Algorithm) -> bool:
        """Record that ``algorithm`` explored ``position``.

        Returns:
            True if the ownership set grew
        """
        old = self._masks.get(position, 0)
        new = old | int(algorithm)
        if new == old:
            return False
        self._masks[position] = new
        return True

    def mask(self, position: Position) -> int:
        return self._masks.get(position, 0)

    def owners(self, position: Position) -> Tuple[Algorithm, ...]:
        return mask_owners(self.mask(position))

    def state(self, position: Position) -> CellState:
        return COMBINATION_TABLE[self.mask(position)]

    def snapshot(self) -> Dict[Position, int]:
        return dict(self._masks)

    def __contains__(self, position: Position) -> bool:
        return position in self._masks

    def __iter__(self) -> Iterator[Position]:
        return iter(self._masks)

    def __len__(self) -> int:
        return len(self._masks)
