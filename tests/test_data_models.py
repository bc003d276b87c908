"""Tests for core data models."""

import pytest

from maze_search.core.data_models import (
    Algorithm, AlgorithmResult, CellType, InvalidMazeError, Position, UnknownAlgorithmError,
    SELECTABLE_ALGORITHMS, SINGLE_ALGORITHMS
)


class TestAlgorithm:
    """Test algorithm identifiers."""

    def test_flags_are_distinct_bits(self):
        values = [int(a) for a in SINGLE_ALGORITHMS]
        assert values == [1, 2, 4, 8, 16]

    def test_display_names(self):
        assert Algorithm.ASTAR.display_name == 'A*'
        assert Algorithm.IDA_STAR.display_name == 'IDA*'
        assert Algorithm.WEIGHTED_ASTAR.display_name == 'Weighted A*'

    @pytest.mark.parametrize("value,expected", [
        ('DFS', Algorithm.DFS),
        ('bfs', Algorithm.BFS),
        ('A*', Algorithm.ASTAR),
        ('astar', Algorithm.ASTAR),
        ('Weighted A*', Algorithm.WEIGHTED_ASTAR),
        ('weighted-astar', Algorithm.WEIGHTED_ASTAR),
        ('IDA*', Algorithm.IDA_STAR),
        ('ida_star', Algorithm.IDA_STAR),
        (4, Algorithm.ASTAR),
        (Algorithm.BFS, Algorithm.BFS),
    ])
    def test_parse(self, value, expected):
        assert Algorithm.parse(value) == expected

    @pytest.mark.parametrize("value", ['dijkstra', '', 3, 64])
    def test_parse_rejects_unknown(self, value):
        with pytest.raises(UnknownAlgorithmError):
            Algorithm.parse(value)

    def test_unknown_algorithm_is_value_error(self):
        with pytest.raises(ValueError):
            Algorithm.parse('greedy')

    def test_selectable_subset(self):
        assert SELECTABLE_ALGORITHMS == (Algorithm.DFS, Algorithm.BFS, Algorithm.ASTAR)


class TestCellType:
    """Test cell types and their ASCII symbols."""

    def test_symbols(self):
        assert [c.symbol for c in CellType] == ['#', '.', 'S', 'G']

    def test_from_symbol(self):
        assert CellType.from_symbol('G') == CellType.GOAL

    def test_unknown_symbol(self):
        with pytest.raises(InvalidMazeError):
            CellType.from_symbol('x')


class TestAlgorithmResult:
    """Test the result record."""

    def make_result(self, **overrides):
        fields = dict(
            name='BFS',
            algorithm=Algorithm.BFS,
            found=True,
            path=(Position(1, 1), Position(1, 2)),
            exploration_order=(Position(1, 1), Position(1, 2)),
            nodes_expanded=2,
            path_length=1,
            time_taken=0.01,
            is_optimal=True,
        )
        fields.update(overrides)
        return AlgorithmResult(**fields)

    def test_nodes_expanded_must_match_exploration(self):
        with pytest.raises(AssertionError):
            self.make_result(nodes_expanded=5)

    def test_unsuccessful_result_has_empty_path(self):
        with pytest.raises(AssertionError):
            self.make_result(found=False)

        result = self.make_result(found=False, path=(), path_length=0)
        assert result.path == ()

    def test_with_timing_returns_copy(self):
        result = self.make_result()
        timed = result.with_timing(2.5, 1)

        assert timed.time_taken == 2.5
        assert timed.steps_to_goal == 1
        assert result.time_taken == 0.01
        assert result.steps_to_goal is None

    def test_to_dict(self):
        data = self.make_result().to_dict()

        assert data['algorithm'] == 'BFS'
        assert data['path'] == [[1, 1], [1, 2]]
        assert data['nodes_expanded'] == 2
        assert data['steps_to_goal'] is None
