"""CLI command implementations."""

import asyncio
import json
import logging
from typing import List, Optional

import uvicorn
from omegaconf import DictConfig, OmegaConf

from maze_search.analysis.metrics import analyze_results, format_summary
from maze_search.comparison.aggregator import ComparisonReplay, ReplayFrame
from maze_search.config import ConfigValidationError, get_parameter, load_config
from maze_search.core.data_models import Algorithm
from maze_search.core.grid import MazeGrid
from maze_search.generation.maze_generator import create_maze_generator
from maze_search.integration.io import load_maze, maze_to_dict, save_maze
from maze_search.replay.driver import ReplayDriver, speed_to_interval
from maze_search.search.registry import run_algorithm, run_algorithms

from .utils import LEGEND, format_duration, format_result, render_maze, save_results

logger = logging.getLogger(__name__)


def _config_overrides(args) -> List[str]:
    return list(getattr(args, 'config', None) or [])


def load_runtime_config(args) -> Optional[DictConfig]:
    """Load configuration for a command; None when no config directory exists.

    Without ``-v`` or ``-q`` the root log level follows ``logging.level``.
    """
    try:
        config = load_config(overrides=_config_overrides(args),
                             config_dir=getattr(args, 'config_dir', None))
    except FileNotFoundError as e:
        logger.warning(f"{e}; using built-in defaults")
        return None

    if not getattr(args, 'verbose', 0) and not getattr(args, 'quiet', False):
        level = str(get_parameter('logging.level', 'WARNING')).upper()
        logging.getLogger().setLevel(level)
    return config


def build_grid(args, config: Optional[DictConfig]) -> MazeGrid:
    """Load the maze named by ``--maze`` or generate one from size and seed options."""
    if getattr(args, 'maze', None):
        return load_maze(args.maze)

    generator = create_maze_generator(config)
    if getattr(args, 'rows', None):
        generator.rows = args.rows
    if getattr(args, 'cols', None):
        generator.cols = args.cols
    seed = args.seed if getattr(args, 'seed', None) is not None else generator.default_seed
    return generator.generate(seed)


def generate_command(args) -> int:
    """Handle generate command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        config = load_runtime_config(args)
        grid = build_grid(args, config)

        if args.output:
            save_maze(grid, args.output)
            if not args.quiet:
                print(f"Saved {grid.rows}x{grid.cols} maze to {args.output}")
        elif args.format == 'json':
            print(json.dumps(maze_to_dict(grid)))
        else:
            print(grid)
        return 0

    except Exception as e:
        logger.error(f"Generate command failed: {e}")
        return 1


def solve_command(args) -> int:
    """Handle solve command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code: 0 when a path was found
    """
    try:
        config = load_runtime_config(args)
        grid = build_grid(args, config)
        start, goal = grid.require_endpoints()

        options = {}
        if Algorithm.parse(args.algorithm) == Algorithm.WEIGHTED_ASTAR and args.weight is not None:
            options['weight'] = args.weight
        logger.info(f"Solving {grid.rows}x{grid.cols} maze with {args.algorithm}")
        result = run_algorithm(args.algorithm, grid, start, goal, **options)

        if args.output:
            save_results({'maze': maze_to_dict(grid), 'result': result}, args.output)
            logger.info(f"Results saved to {args.output}")

        if not args.quiet:
            print(render_maze(grid, result.path))
            print()
            print(format_result(result))
            if result.stats:
                print(', '.join(f"{key}={value}" for key, value in result.stats.items()))

        return 0 if result.found else 1

    except Exception as e:
        logger.error(f"Solve command failed: {e}")
        return 1


def _print_frame(grid: MazeGrid, replay: ComparisonReplay):
    def on_frame(frame: ReplayFrame) -> None:
        # Home the cursor and clear before redrawing
        print("\x1b[H\x1b[2J", end='')
        print(render_maze(grid, cell_states=replay.cell_states()))
        print(f"tick {frame.tick + 1}/{replay.max_steps}")
    return on_frame


def compare_command(args) -> int:
    """Handle compare command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code: 0 when at least one algorithm found a path
    """
    try:
        config = load_runtime_config(args)
        grid = build_grid(args, config)
        start, goal = grid.require_endpoints()

        algorithms = args.algorithms or list(get_parameter('search.comparison.algorithms',
                                                           ['DFS', 'BFS', 'A*']))
        primary = get_parameter('search.comparison.primary', None)
        parsed = [Algorithm.parse(a) for a in algorithms]
        if primary is not None and Algorithm.parse(primary) not in parsed:
            primary = None

        results = run_algorithms(parsed, grid, start, goal)
        replay = ComparisonReplay(results, goal, grid, primary)

        if args.animate:
            speed = args.speed if args.speed is not None else get_parameter('replay.speed', 50)
            elapsed = asyncio.run(ReplayDriver().play(
                replay.frames(), _print_frame(grid, replay), speed_to_interval(speed)))
            results = replay.normalize_timings(elapsed)
            print(f"Replay took {format_duration(elapsed)}")
        else:
            replay.run()
            results = [r.with_timing(r.time_taken, replay.steps_to_goal(r)) for r in results]
            if not args.quiet:
                print(render_maze(grid, cell_states=replay.cell_states()))
                print(LEGEND)

        summary = analyze_results(results)
        if args.output:
            save_results({
                'maze': maze_to_dict(grid),
                'results': results,
                'arrival_steps': {a.display_name: step for a, step in replay.arrival_steps.items()},
                'summary': summary,
            }, args.output)
            logger.info(f"Results saved to {args.output}")

        if not args.quiet:
            print()
            for result in results:
                print(format_result(result))
            print()
            print(format_summary(summary))

        return 0 if summary.any_found else 1

    except Exception as e:
        logger.error(f"Compare command failed: {e}")
        return 1


def config_command(args) -> int:
    """Handle config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        if args.config_action == 'show':
            config = load_config(overrides=_config_overrides(args),
                                 config_dir=getattr(args, 'config_dir', None), validate=False)
            print("Current Configuration:")
            print("=" * 50)
            print(OmegaConf.to_yaml(config, resolve=True))
            return 0

        elif args.config_action == 'validate':
            try:
                load_config(overrides=_config_overrides(args),
                            config_dir=getattr(args, 'config_dir', None))
                print("Configuration is valid")
                return 0
            except ConfigValidationError as e:
                print(f"Configuration validation failed: {e}")
                return 1

        else:
            print("Unknown config action")
            return 1

    except Exception as e:
        logger.error(f"Config command failed: {e}")
        return 1


def serve_command(args) -> int:
    """Handle serve command for the web front-end.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    config = load_runtime_config(args)
    host = args.host or get_parameter('web.host', '127.0.0.1')
    port = args.port or get_parameter('web.port', 8000)

    from maze_search.web.server import create_asgi_app
    logger.info(f"Starting web server at http://{host}:{port}")
    uvicorn.run(create_asgi_app(config), host=host, port=port)
    return 0