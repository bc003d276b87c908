"""Tests for CLI interface."""

import pytest
import json
import logging
from unittest.mock import patch

from maze_search.cli.main import main_cli, create_parser
from maze_search.cli.utils import format_duration, format_result, render_maze, save_results
from maze_search.comparison.ownership import CellState
from maze_search.core.data_models import Algorithm
from maze_search.integration.io import load_maze
from maze_search.search import run_algorithm

from maze_helpers import shortest_path_length

ENCLOSED = "#####\n#S..#\n#..##\n#.#G#\n#####\n"


@pytest.fixture
def maze_file(tmp_path):
    """Generated 11x15 maze written through the CLI."""
    path = tmp_path / "maze.txt"
    assert main_cli(['-q', '-o', str(path), 'generate', '--rows', '11', '--cols', '15', '--seed', '3']) == 0
    return path


@pytest.fixture
def root_level():
    """Restore the root logger level a command changes."""
    root = logging.getLogger()
    saved = root.level
    yield root
    root.setLevel(saved)


class TestCLIParser:
    """Test CLI argument parsing."""

    def test_create_parser(self):
        parser = create_parser()
        assert parser.prog == 'maze-search'

    def test_solve_command_parsing(self):
        parser = create_parser()

        args = parser.parse_args(['solve'])
        assert args.command == 'solve'
        assert args.algorithm == 'A*'
        assert args.weight is None
        assert args.maze is None

        args = parser.parse_args(['solve', '-a', 'Weighted A*', '-w', '3', '-m', 'maze.txt', '-s', '9'])
        assert args.algorithm == 'Weighted A*'
        assert args.weight == 3.0
        assert args.maze == 'maze.txt'
        assert args.seed == 9

    def test_compare_command_parsing(self):
        parser = create_parser()

        args = parser.parse_args(['compare', '--algorithms', 'DFS', 'IDA*', '--animate', '--speed', '80'])
        assert args.algorithms == ['DFS', 'IDA*']
        assert args.animate is True
        assert args.speed == 80

    def test_config_command_parsing(self):
        parser = create_parser()
        assert parser.parse_args(['config', 'show']).config_action == 'show'
        assert parser.parse_args(['config', 'validate']).config_action == 'validate'

    def test_global_options(self):
        parser = create_parser()

        assert parser.parse_args(['-v', 'solve']).verbose == 1
        assert parser.parse_args(['-vv', 'solve']).verbose == 2
        assert parser.parse_args(['--quiet', 'solve']).quiet is True

        args = parser.parse_args([
            '--config', 'maze.rows=31',
            '-c', 'replay.speed=90',
            '--output', 'results.json',
            'compare'
        ])
        assert args.config == ['maze.rows=31', 'replay.speed=90']
        assert args.output == 'results.json'


class TestCLIUtils:
    """Test CLI utility functions."""

    def test_format_duration(self):
        assert format_duration(0.0005) == "500.0µs"
        assert format_duration(0.5) == "500.0ms"
        assert format_duration(1.5) == "1.50s"
        assert format_duration(65.5) == "1m 5.5s"

    def test_save_results(self, tmp_path, open_grid):
        result = run_algorithm(Algorithm.BFS, open_grid, (1, 1), (3, 3))
        output_file = tmp_path / "nested" / "results.json"

        save_results({'result': result, 'ratio': float('inf'), 'cells': open_grid.cells}, output_file)

        with open(output_file) as f:
            data = json.load(f)
        assert data['result']['algorithm'] == 'BFS'
        assert data['result']['path_length'] == 4
        assert data['ratio'] is None
        assert data['cells'][1][1] == 2

    def test_render_maze(self, open_grid):
        states = [[CellState.UNEXPLORED] * 5 for _ in range(5)]
        states[1][2] = CellState.DFS_BFS_EXPLORED
        states[2][2] = CellState.ALL_EXPLORED
        states[1][1] = CellState.PATH

        text = render_maze(open_grid, path=[(1, 1), (2, 1), (3, 1)], cell_states=states)

        assert text.splitlines() == [
            "#####",
            "#S+.#",
            "#*@.#",
            "#*.G#",
            "#####",
        ]

    def test_format_result(self, open_grid, enclosed_goal_grid):
        found = run_algorithm(Algorithm.ASTAR, open_grid, (1, 1), (3, 3))
        missing = run_algorithm(Algorithm.BFS, enclosed_goal_grid, (1, 1), (3, 3))

        assert format_result(found).startswith("A*: path 4, 5 nodes expanded")
        assert format_result(missing) == "BFS: no path (6 nodes expanded)"


class TestCommands:
    """Run the commands end to end on small mazes."""

    def test_generate_prints_text(self, capsys):
        assert main_cli(['generate', '--rows', '7', '--cols', '9', '--seed', '1']) == 0

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 7
        assert all(len(line) == 9 for line in lines)

    def test_generate_json(self, capsys):
        assert main_cli(['generate', '--rows', '7', '--cols', '7', '--format', 'json']) == 0

        data = json.loads(capsys.readouterr().out)
        assert data['rows'] == 7
        assert data['cells'][1][1] == 2

    def test_generate_is_reproducible(self, tmp_path, maze_file):
        again = tmp_path / "again.json"
        main_cli(['-q', '-o', str(again), 'generate', '--rows', '11', '--cols', '15', '--seed', '3'])
        assert load_maze(again) == load_maze(maze_file)

    def test_solve(self, tmp_path, maze_file):
        output = tmp_path / "solve.json"

        assert main_cli(['-q', '-o', str(output), 'solve', '-m', str(maze_file), '-a', 'bfs']) == 0

        with open(output) as f:
            data = json.load(f)
        grid = load_maze(maze_file)
        start, goal = grid.require_endpoints()
        assert data['result']['found']
        assert data['result']['path_length'] == shortest_path_length(grid, start, goal)
        assert data['maze']['rows'] == 11

    def test_solve_prints_path(self, capsys, maze_file):
        assert main_cli(['solve', '-m', str(maze_file), '-a', 'Weighted A*', '-w', '1.5']) == 0

        out = capsys.readouterr().out
        assert '*' in out
        assert 'Weighted A* (ε=1.5)' in out

    def test_solve_without_path(self, tmp_path):
        maze = tmp_path / "enclosed.txt"
        maze.write_text(ENCLOSED)
        assert main_cli(['-q', 'solve', '-m', str(maze)]) == 1

    def test_solve_missing_maze(self, tmp_path):
        assert main_cli(['-q', 'solve', '-m', str(tmp_path / "absent.txt")]) == 1

    def test_solve_unknown_algorithm(self, maze_file):
        assert main_cli(['-q', 'solve', '-m', str(maze_file), '-a', 'dijkstra']) == 1

    def test_compare(self, tmp_path, maze_file, capsys):
        output = tmp_path / "compare.json"

        exit_code = main_cli(['-o', str(output), 'compare', '-m', str(maze_file),
                              '-a', 'DFS', 'BFS', 'IDA*'])

        assert exit_code == 0
        with open(output) as f:
            data = json.load(f)
        assert [r['algorithm'] for r in data['results']] == ['DFS', 'BFS', 'IDA_STAR']
        assert set(data['arrival_steps']) == {'DFS', 'BFS', 'IDA*'}
        assert data['summary']['any_found']
        assert set(data['summary']['optimal_algorithms']) >= {'BFS', 'IDA*'}
        assert 'Most efficient:' in capsys.readouterr().out

    def test_compare_animated(self, maze_file, capsys):
        exit_code = main_cli(['compare', '-m', str(maze_file), '-a', 'BFS', 'A*',
                              '--animate', '--speed', '100'])

        assert exit_code == 0
        assert 'Replay took' in capsys.readouterr().out

    def test_compare_without_path(self, tmp_path):
        maze = tmp_path / "enclosed.txt"
        maze.write_text(ENCLOSED)
        assert main_cli(['-q', 'compare', '-m', str(maze)]) == 1

    def test_config_validate(self, capsys):
        assert main_cli(['config', 'validate']) == 0
        assert 'Configuration is valid' in capsys.readouterr().out

    def test_config_validate_rejects_override(self, capsys):
        assert main_cli(['-c', 'replay.speed=0', 'config', 'validate']) == 1
        assert 'validation failed' in capsys.readouterr().out

    def test_config_show(self, capsys):
        assert main_cli(['-c', 'maze.rows=31', 'config', 'show']) == 0

        out = capsys.readouterr().out
        assert 'Current Configuration:' in out
        assert 'rows: 31' in out

    def test_log_level_from_config(self, root_level):
        assert main_cli(['-c', 'logging.level=INFO', 'generate', '--rows', '7', '--cols', '7']) == 0
        assert root_level.level == logging.INFO

    @pytest.mark.parametrize("flag,expected", [('-q', logging.ERROR), ('-vv', logging.DEBUG)])
    def test_flags_override_config_level(self, root_level, flag, expected):
        root_level.setLevel(expected)
        assert main_cli([flag, '-c', 'logging.level=INFO', 'generate', '--rows', '7', '--cols', '7']) == 0
        assert root_level.level == expected


class TestMainCLI:
    """Test main CLI function."""

    def test_main_cli_no_command(self):
        assert main_cli([]) == 1

    def test_main_cli_help(self):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(['--help'])
        assert exc_info.value.code == 0

    @pytest.mark.parametrize("command,argv", [
        ('generate_command', ['generate']),
        ('solve_command', ['solve']),
        ('compare_command', ['compare']),
        ('config_command', ['config', 'show']),
        ('serve_command', ['serve', '--port', '9000']),
    ])
    def test_routing(self, command, argv):
        with patch(f'maze_search.cli.commands.{command}', return_value=0) as mock_command:
            assert main_cli(argv) == 0
        mock_command.assert_called_once()

    @patch('maze_search.cli.commands.solve_command', side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt(self, mock_solve):
        assert main_cli(['solve']) == 130

    @patch('maze_search.cli.commands.serve_command', side_effect=RuntimeError("boom"))
    def test_unexpected_error(self, mock_serve):
        assert main_cli(['serve']) == 1
