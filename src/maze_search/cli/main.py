"""Main CLI entry point for the maze search demonstrator."""

import sys
import argparse
import logging
from typing import List, Optional

from . import commands
from .utils import setup_logging


def _add_maze_source(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--maze', '-m',
        type=str,
        help='Maze file (.json, .txt or .npy); generated when omitted'
    )
    parser.add_argument('--rows', type=int, help='Rows of the generated maze')
    parser.add_argument('--cols', type=int, help='Columns of the generated maze')
    parser.add_argument(
        '--seed', '-s',
        type=int,
        help='Generator seed (default: maze.seed from configuration)'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog='maze-search',
        description='Maze search demonstrator - compare DFS, BFS, A*, Weighted A* and IDA* on grid mazes',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  maze-search generate --seed 7 -o maze.txt     # Generate and save a maze
  maze-search solve --algorithm a* -m maze.txt  # Solve with one algorithm
  maze-search compare --animate --speed 90      # Replay DFS, BFS and A* together
  maze-search config show                       # Show current configuration
  maze-search serve --port 8000                 # Launch the web front-end
        """
    )

    # Global options
    parser.add_argument(
        '--config', '-c',
        type=str,
        action='append',
        help='Configuration override, repeatable (e.g., maze.rows=31)'
    )

    parser.add_argument(
        '--config-dir',
        type=str,
        help='Configuration directory (default: conf/ at the project root)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='count',
        default=0,
        help='Increase verbosity (use -v or -vv)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress all output except results'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        help='Output file (maze file for generate, JSON results otherwise)'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands',
        metavar='COMMAND'
    )

    # Generate command
    generate_parser = subparsers.add_parser(
        'generate',
        help='Generate a maze',
        description='Generate a seeded maze and print or save it'
    )
    _add_maze_source(generate_parser)
    generate_parser.add_argument(
        '--format', '-f',
        choices=['text', 'json'],
        default='text',
        help='Output format when printing (default: text)'
    )

    # Solve command
    solve_parser = subparsers.add_parser(
        'solve',
        help='Run one search algorithm',
        description='Run one search algorithm and draw its path'
    )
    _add_maze_source(solve_parser)
    solve_parser.add_argument(
        '--algorithm', '-a',
        type=str,
        default='A*',
        help='DFS, BFS, A*, "Weighted A*" or IDA* (default: A*)'
    )
    solve_parser.add_argument(
        '--weight', '-w',
        type=float,
        help='Heuristic weight for Weighted A* (default: search.weighted_astar.weight)'
    )

    # Compare command
    compare_parser = subparsers.add_parser(
        'compare',
        help='Compare several algorithms on one maze',
        description='Run several algorithms and replay them on a shared clock'
    )
    _add_maze_source(compare_parser)
    compare_parser.add_argument(
        '--algorithms', '-a',
        nargs='+',
        help='Algorithms to compare (default: search.comparison.algorithms)'
    )
    compare_parser.add_argument(
        '--animate',
        action='store_true',
        help='Replay the exploration in the terminal'
    )
    compare_parser.add_argument(
        '--speed',
        type=int,
        help='Replay speed 1-100 (default: replay.speed)'
    )

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Show or validate configuration'
    )
    config_subparsers = config_parser.add_subparsers(
        dest='config_action',
        help='Configuration actions'
    )
    config_subparsers.add_parser('show', help='Show current configuration')
    config_subparsers.add_parser('validate', help='Validate configuration')

    # Serve command
    serve_parser = subparsers.add_parser(
        'serve',
        help='Launch the web front-end',
        description='Serve the REST and Socket.IO API for a browser front-end'
    )
    serve_parser.add_argument(
        '--host',
        type=str,
        help='Host to bind the server to (default: web.host)'
    )
    serve_parser.add_argument(
        '--port',
        type=int,
        help='Port to run the server on (default: web.port)'
    )

    return parser


def main_cli(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.quiet:
        log_level = logging.ERROR
    elif parsed_args.verbose == 0:
        log_level = logging.WARNING
    elif parsed_args.verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    try:
        if not parsed_args.command:
            parser.print_help()
            return 1

        if parsed_args.command == 'generate':
            return commands.generate_command(parsed_args)
        if parsed_args.command == 'solve':
            return commands.solve_command(parsed_args)
        if parsed_args.command == 'compare':
            return commands.compare_command(parsed_args)
        if parsed_args.command == 'config':
            return commands.config_command(parsed_args)
        if parsed_args.command == 'serve':
            return commands.serve_command(parsed_args)

        logger.error(f"Unknown command: {parsed_args.command}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def main() -> None:
    """Entry point for console script."""
    sys.exit(main_cli())


if __name__ == '__main__':
    main()
