"""Comparison aggregator.

Replays several precomputed search traces on one shared clock and merges
their exploration into combined cell states.
"""

from .ownership import (
    CellState, OwnershipMap, COMBINATION_TABLE, COLOR_TABLE, ALGORITHM_COLORS,
    combined_state, combined_colors, mask_owners
)
from .aggregator import ComparisonReplay, ReplayFrame, aggregate, select_primary

__all__ = [
    'CellState',
    'OwnershipMap',
    'COMBINATION_TABLE',
    'COLOR_TABLE',
    'ALGORITHM_COLORS',
    'combined_state',
    'combined_colors',
    'mask_owners',
    'ComparisonReplay',
    'ReplayFrame',
    'aggregate',
    'select_primary'
]
