"""Tests for ownership tracking and the step-synchronised replay."""

import pytest

from maze_search.comparison import (
    COLOR_TABLE, COMBINATION_TABLE, CellState, ComparisonReplay, OwnershipMap, aggregate,
    combined_state, mask_owners, select_primary
)
from maze_search.comparison.ownership import ALGORITHM_COLORS
from maze_search.core.data_models import Algorithm, Position
from maze_search.generation.maze_generator import generate_maze
from maze_search.search import run_algorithms

DFS, BFS, ASTAR = Algorithm.DFS, Algorithm.BFS, Algorithm.ASTAR


@pytest.fixture
def open_results(open_grid):
    return run_algorithms([DFS, BFS, ASTAR], open_grid, (1, 1), (3, 3))


class TestCombinationTable:
    """Test the mask-indexed state and colour tables."""

    def test_table_size(self):
        assert len(COMBINATION_TABLE) == 32
        assert len(COLOR_TABLE) == 32

    def test_single_owners(self):
        assert combined_state(0) == CellState.UNEXPLORED
        assert combined_state(DFS) == CellState.DFS_EXPLORED
        assert combined_state(BFS) == CellState.BFS_EXPLORED
        assert combined_state(ASTAR) == CellState.ASTAR_EXPLORED
        assert combined_state(Algorithm.WEIGHTED_ASTAR) == CellState.WEIGHTED_ASTAR_EXPLORED
        assert combined_state(Algorithm.IDA_STAR) == CellState.IDA_STAR_EXPLORED

    def test_pairs_and_triple(self):
        assert combined_state(DFS | BFS) == CellState.DFS_BFS_EXPLORED
        assert combined_state(DFS | ASTAR) == CellState.DFS_ASTAR_EXPLORED
        assert combined_state(BFS | ASTAR) == CellState.BFS_ASTAR_EXPLORED
        assert combined_state(DFS | BFS | ASTAR) == CellState.ALL_EXPLORED

    def test_other_mixes(self):
        assert combined_state(ASTAR | Algorithm.IDA_STAR) == CellState.MULTI_EXPLORED
        assert combined_state(31) == CellState.MULTI_EXPLORED

    def test_colours(self):
        assert COLOR_TABLE[int(DFS)] == ('#f97316',)
        assert COLOR_TABLE[int(BFS | ASTAR)] == ('#3b82f6', '#22c55e')
        assert len(COLOR_TABLE[int(DFS | BFS | ASTAR)]) == 3
        assert set(ALGORITHM_COLORS) == set(mask_owners(31))


class TestOwnershipMap:

    def test_claim_reports_growth(self):
        ownership = OwnershipMap()
        position = Position(1, 2)

        assert ownership.claim(position, DFS)
        assert not ownership.claim(position, DFS)
        assert ownership.claim(position, BFS)
        assert ownership.owners(position) == (DFS, BFS)
        assert ownership.state(position) == CellState.DFS_BFS_EXPLORED

    def test_unclaimed(self):
        ownership = OwnershipMap()
        assert ownership.mask(Position(0, 0)) == 0
        assert Position(0, 0) not in ownership
        assert len(ownership) == 0


class TestSelectPrimary:

    def test_prefers_astar(self, open_results):
        assert select_primary(open_results).algorithm == ASTAR

    def test_falls_back_to_optimal(self, open_results):
        assert select_primary(open_results[:2]).algorithm == BFS

    def test_falls_back_to_first(self, open_results):
        assert select_primary(open_results[:1]).algorithm == DFS

    def test_empty(self):
        assert select_primary([]) is None


class TestComparisonReplay:
    """Open 5x5 grid replayed for DFS, BFS and A*."""

    def test_max_steps_and_frame_count(self, open_grid, open_results):
        replay = ComparisonReplay(open_results, (3, 3), open_grid)
        frames = replay.run()

        assert replay.max_steps == 9
        # One frame per tick plus the path overlay
        assert len(frames) == 10
        assert [f.tick for f in frames[:-1]] == list(range(9))
        assert frames[-1].final

    def test_tick_merges_every_algorithm(self, open_grid, open_results):
        replay = ComparisonReplay(open_results, (3, 3), open_grid)
        frames = replay.run()

        # Tick 0: all at Start, which keeps its own cell type
        assert frames[0].updates == {}
        assert frames[1].updates == {(2, 1): CellState.ALL_EXPLORED}
        assert frames[2].updates == {
            (3, 1): CellState.DFS_ASTAR_EXPLORED,
            (1, 2): CellState.BFS_EXPLORED,
        }
        assert frames[3].updates == {
            (3, 2): CellState.DFS_ASTAR_EXPLORED,
            (3, 1): CellState.ALL_EXPLORED,
        }

    def test_arrival_steps(self, open_grid, open_results):
        frames, arrivals = aggregate(open_results, (3, 3), open_grid)

        assert arrivals == {ASTAR: 4, DFS: 8, BFS: 8}
        assert frames[4].arrivals == {ASTAR: 4}

    def test_path_overlay_excludes_endpoints(self, open_grid, open_results):
        replay = ComparisonReplay(open_results, (3, 3), open_grid)
        overlay = replay.run()[-1]

        assert overlay.updates == {
            (2, 1): CellState.PATH,
            (3, 1): CellState.PATH,
            (3, 2): CellState.PATH,
        }
        states = replay.cell_states()
        assert states[1][1] == CellState.UNEXPLORED
        assert states[3][3] == CellState.UNEXPLORED
        assert states[3][1] == CellState.PATH

    def test_explicit_primary(self, open_grid, open_results):
        replay = ComparisonReplay(open_results, (3, 3), open_grid, primary=DFS)
        overlay = replay.run()[-1]
        assert len(overlay.updates) == 7

    def test_primary_must_be_compared(self, open_grid, open_results):
        with pytest.raises(ValueError):
            ComparisonReplay(open_results[:2], (3, 3), open_grid, primary=ASTAR)

    def test_duplicate_algorithms_rejected(self, open_grid, open_results):
        with pytest.raises(ValueError):
            ComparisonReplay([open_results[0], open_results[0]], (3, 3), open_grid)

    def test_ownership_is_monotonic(self):
        grid = generate_maze(21, 41, seed=12345)
        start, goal = grid.require_endpoints()
        results = run_algorithms([DFS, BFS, ASTAR], grid, start, goal)
        replay = ComparisonReplay(results, goal, grid)

        previous = {}
        for tick in range(replay.max_steps):
            replay.step(tick)
            current = replay.ownership.snapshot()
            for position, mask in previous.items():
                assert current[position] & mask == mask
            previous = current

    def test_timing_normalisation(self, open_grid, open_results):
        replay = ComparisonReplay(open_results, (3, 3), open_grid)
        replay.run()
        timed = {r.algorithm: r for r in replay.normalize_timings(9.0)}

        assert timed[ASTAR].time_taken == pytest.approx(4.0)
        assert timed[ASTAR].steps_to_goal == 4
        assert timed[DFS].time_taken == pytest.approx(8.0)

    def test_single_result(self, open_grid, open_results):
        replay = ComparisonReplay(open_results[2:], (3, 3), open_grid)
        frames = replay.run()

        assert len(frames) == 6
        assert replay.arrival_steps == {ASTAR: 4}

    def test_single_result_uses_explored_state(self, open_grid, open_results):
        result = open_results[1]
        replay = ComparisonReplay([result], (3, 3), open_grid)
        frames = replay.run()

        exploring = {state for frame in frames[:-1] for state in frame.updates.values()}
        assert exploring == {CellState.EXPLORED}
        assert set(frames[-1].updates.values()) == {CellState.PATH}
        off_path = next(p for p in result.exploration_order if p not in result.path)
        assert replay.cell_state(off_path) == CellState.EXPLORED

    def test_without_grid_uses_trace_endpoints(self, open_results):
        replay = ComparisonReplay(open_results, (3, 3))
        frames = replay.run()

        assert frames[0].updates == {}
        with pytest.raises(ValueError):
            replay.cell_states()
        assert len(replay.cell_states(5, 5)) == 5


class TestNoPathReplay:

    def test_overlay_skipped(self, enclosed_goal_grid):
        results = run_algorithms([DFS, BFS, ASTAR], enclosed_goal_grid, (1, 1), (3, 3))
        replay = ComparisonReplay(results, (3, 3), enclosed_goal_grid)
        frames = replay.run()

        assert len(frames) == replay.max_steps == 6
        assert not any(f.final for f in frames)
        assert replay.arrival_steps == {}
        assert all(state != CellState.PATH for row in replay.cell_states() for state in row)

    def test_timing_falls_back_to_trace_length(self, enclosed_goal_grid):
        results = run_algorithms([BFS], enclosed_goal_grid, (1, 1), (3, 3))
        replay = ComparisonReplay(results, (3, 3), enclosed_goal_grid)
        replay.run()

        timed = replay.normalize_timings(3.0)[0]
        assert timed.steps_to_goal == 6
        assert timed.time_taken == pytest.approx(3.0)


class TestReplayFrame:

    def test_to_dict(self, open_grid, open_results):
        frames = ComparisonReplay(open_results, (3, 3), open_grid).run()
        data = frames[4].to_dict()

        assert data['tick'] == 4
        assert data['arrivals'] == {'A*': 4}
        assert not data['final']
        assert all(set(u) == {'row', 'col', 'state'} for u in data['updates'])
