"""Tests for comparative analysis."""

import math

import pytest

from maze_search.analysis import analyze_results, efficiency_ratio, format_summary
from maze_search.core.data_models import Algorithm
from maze_search.search import run_algorithms


@pytest.fixture
def timed_results(open_grid):
    """DFS, BFS and A* on the open grid with replay-style timings."""
    results = run_algorithms([Algorithm.DFS, Algorithm.BFS, Algorithm.ASTAR], open_grid, (1, 1), (3, 3))
    timings = {Algorithm.DFS: 8.0, Algorithm.BFS: 8.0, Algorithm.ASTAR: 4.0}
    return [r.with_timing(timings[r.algorithm]) for r in results]


class TestAnalyzeResults:

    def test_rankings(self, timed_results):
        summary = analyze_results(timed_results)

        assert summary.any_found
        assert summary.most_efficient == 'A*'
        assert summary.min_nodes == 5
        # Ties go to the first result listed
        assert summary.least_efficient == 'DFS'
        assert summary.max_nodes == 9
        assert summary.shortest_path == 4
        assert summary.shortest_path_by == ['BFS', 'A*']
        assert summary.longest_path == 8
        assert summary.fastest == 'A*'
        assert summary.slowest == 'DFS'
        assert summary.optimal_algorithms == ['BFS', 'A*']

    def test_efficiency_ranking(self, timed_results):
        summary = analyze_results(timed_results)

        names = [name for name, _ in summary.efficiency_ranking]
        ratios = [ratio for _, ratio in summary.efficiency_ranking]
        assert names == ['DFS', 'A*', 'BFS']
        assert ratios == pytest.approx([9 / 8, 5 / 4, 9 / 4])

    def test_overheads(self, timed_results):
        rows = {row.name: row for row in analyze_results(timed_results).rows}

        assert rows['DFS'].time_overhead_pct == pytest.approx(100.0)
        assert rows['DFS'].nodes_overhead_pct == pytest.approx(80.0)
        assert rows['DFS'].extra_steps == 4
        assert rows['A*'].time_overhead_pct == 0.0

    def test_failed_results_excluded(self, enclosed_goal_grid, timed_results):
        failed = run_algorithms([Algorithm.IDA_STAR], enclosed_goal_grid, (1, 1), (3, 3))
        summary = analyze_results(timed_results + failed)

        assert summary.failed == ['IDA*']
        assert len(summary.rows) == 3

    def test_none_found(self, enclosed_goal_grid):
        results = run_algorithms([Algorithm.DFS, Algorithm.BFS], enclosed_goal_grid, (1, 1), (3, 3))
        summary = analyze_results(results)

        assert not summary.any_found
        assert summary.efficiency_ranking == []
        assert summary.failed == ['DFS', 'BFS']
        assert format_summary(summary) == "No algorithm found a path to the goal."

    def test_zero_length_path_ratio(self, open_grid):
        result = run_algorithms([Algorithm.BFS], open_grid, (1, 1), (1, 1))[0]
        assert math.isinf(efficiency_ratio(result))

    def test_to_dict_is_json_friendly(self, open_grid):
        result = run_algorithms([Algorithm.BFS], open_grid, (1, 1), (1, 1))[0]
        data = analyze_results([result]).to_dict()

        assert data['efficiency_ranking'] == [{'name': 'BFS', 'ratio': None}]
        assert data['shortest_path_by'] == ['BFS']


class TestFormatSummary:

    def test_table(self, timed_results):
        text = format_summary(analyze_results(timed_results))

        assert "Fastest to goal:  A*" in text
        assert "Most efficient:   A* (5 nodes)" in text
        assert "Shortest path:    4 steps by BFS, A*" in text
        assert text.count('\n') >= 7
