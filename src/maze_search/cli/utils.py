"""CLI utility functions."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from maze_search.comparison.ownership import CellState
from maze_search.core.data_models import AlgorithmResult, CellType
from maze_search.core.grid import MazeGrid


# One character per visual state in terminal output
STATE_SYMBOLS = {
    CellState.EXPLORED: 'o',
    CellState.PATH: '*',
    CellState.DFS_EXPLORED: 'd',
    CellState.BFS_EXPLORED: 'b',
    CellState.ASTAR_EXPLORED: 'a',
    CellState.WEIGHTED_ASTAR_EXPLORED: 'w',
    CellState.IDA_STAR_EXPLORED: 'i',
    CellState.DFS_BFS_EXPLORED: '+',
    CellState.DFS_ASTAR_EXPLORED: '+',
    CellState.BFS_ASTAR_EXPLORED: '+',
    CellState.ALL_EXPLORED: '@',
    CellState.MULTI_EXPLORED: '%',
}

LEGEND = "# wall  S start  G goal  * path  o explored  d/b/a/w/i single  + pair  @ DFS+BFS+A*  % other mix"


def setup_logging(level: int = logging.INFO,
                  format_string: Optional[str] = None) -> None:
    """Setup logging configuration.

    Args:
        level: Logging level
        format_string: Custom format string
    """
    if format_string is None:
        if level <= logging.DEBUG:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Hydra and uvicorn are chatty at INFO
    logging.getLogger('hydra').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)


def save_results(results: Dict[str, Any],
                 output_path: Union[str, Path],
                 pretty: bool = True) -> None:
    """Save results to JSON file.

    Args:
        results: Results dictionary; values may be result objects with ``to_dict``
        output_path: Output file path
        pretty: Whether to pretty-print JSON
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    def convert(obj):
        if hasattr(obj, 'to_dict'):
            return convert(obj.to_dict())
        if hasattr(obj, 'tolist'):
            return obj.tolist()
        if isinstance(obj, dict):
            return {str(k): convert(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [convert(item) for item in obj]
        if isinstance(obj, float) and obj == float('inf'):
            return None
        return obj

    with open(output_path, 'w') as f:
        if pretty:
            json.dump(convert(results), f, indent=2, sort_keys=True)
        else:
            json.dump(convert(results), f)


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if seconds < 0.001:
        return f"{seconds*1000000:.1f}µs"
    elif seconds < 1:
        return f"{seconds*1000:.1f}ms"
    elif seconds < 60:
        return f"{seconds:.2f}s"
    else:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.1f}s"


def render_maze(grid: MazeGrid,
                path: Sequence[Tuple[int, int]] = (),
                cell_states: Optional[List[List[CellState]]] = None) -> str:
    """Render the grid as text, with visual states and a path drawn over free cells.

    Start and Goal always keep their own symbol.
    """
    rows = [list(line) for line in grid.to_strings()]
    if cell_states is not None:
        for r, row in enumerate(cell_states):
            for c, state in enumerate(row):
                if state in STATE_SYMBOLS and grid.cells[r, c] == CellType.FREE:
                    rows[r][c] = STATE_SYMBOLS[state]
    for r, c in path:
        if grid.cells[r, c] == CellType.FREE:
            rows[r][c] = '*'
    return '\n'.join(''.join(row) for row in rows)


def format_result(result: AlgorithmResult) -> str:
    """One-line summary of a result."""
    if not result.found:
        return f"{result.name}: no path ({result.nodes_expanded} nodes expanded)"
    line = (f"{result.name}: path {result.path_length}, "
            f"{result.nodes_expanded} nodes expanded, {format_duration(result.time_taken)}")
    if result.steps_to_goal is not None:
        line += f", goal at tick {result.steps_to_goal}"
    return line
