"""Configuration validation for the maze search demonstrator."""

import logging
from omegaconf import DictConfig

from maze_search.core.data_models import Algorithm, MazeSearchError, UnknownAlgorithmError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidationError(MazeSearchError):
    """Exception raised when configuration validation fails."""
    pass


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: DictConfig) -> None:
    """Validate the complete configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        validate_maze_config(config.get('maze', {}))
        validate_search_config(config.get('search', {}))
        validate_replay_config(config.get('replay', {}))
        validate_web_config(config.get('web', {}))
        validate_logging_config(config.get('logging', {}))

        logger.debug("Configuration validation passed")

    except ConfigValidationError:
        raise
    except Exception as e:
        raise ConfigValidationError(f"Configuration validation failed: {e}")


def validate_maze_config(maze_config: DictConfig) -> None:
    """Validate maze configuration section.

    Args:
        maze_config: Maze configuration section
    """
    if not maze_config:
        return

    for key in ('rows', 'cols'):
        size = maze_config.get(key, 21)
        if not isinstance(size, int) or isinstance(size, bool) or size < 3:
            raise ConfigValidationError(f"maze.{key} must be an integer >= 3, got {size}")

    seed = maze_config.get('seed', None)
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        raise ConfigValidationError(f"maze.seed must be an integer or null, got {seed}")

    fraction = maze_config.get('loop_fraction', 0.08)
    if not _is_number(fraction) or not 0 <= fraction < 1:
        raise ConfigValidationError(f"maze.loop_fraction must be in [0, 1), got {fraction}")


def validate_search_config(search_config: DictConfig) -> None:
    """Validate search configuration section.

    Args:
        search_config: Search configuration section
    """
    if not search_config:
        return

    weighted = search_config.get('weighted_astar', {})
    if weighted:
        weight = weighted.get('weight', 2.0)
        if not _is_number(weight) or weight < 1.0:
            raise ConfigValidationError(
                f"weighted_astar.weight must be a number >= 1.0, got {weight}"
            )

    comparison = search_config.get('comparison', {})
    if comparison:
        names = list(comparison.get('algorithms', []))
        if not names:
            raise ConfigValidationError("comparison.algorithms must not be empty")
        try:
            algorithms = [Algorithm.parse(name) for name in names]
            primary = comparison.get('primary', None)
            if primary is not None and Algorithm.parse(primary) not in algorithms:
                raise ConfigValidationError(
                    f"comparison.primary {primary!r} is not one of comparison.algorithms"
                )
        except UnknownAlgorithmError as e:
            raise ConfigValidationError(f"comparison: {e}")
        if len(set(algorithms)) != len(algorithms):
            raise ConfigValidationError(f"comparison.algorithms contains duplicates: {names}")


def validate_replay_config(replay_config: DictConfig) -> None:
    if not replay_config:
        return

    speed = replay_config.get('speed', 50)
    if not isinstance(speed, int) or isinstance(speed, bool) or not 1 <= speed <= 100:
        raise ConfigValidationError(f"replay.speed must be an integer in [1, 100], got {speed}")


def validate_web_config(web_config: DictConfig) -> None:
    if not web_config:
        return

    port = web_config.get('port', 8000)
    if not isinstance(port, int) or isinstance(port, bool) or not 1 <= port <= 65535:
        raise ConfigValidationError(f"web.port must be in [1, 65535], got {port}")


def validate_logging_config(logging_config: DictConfig) -> None:
    if not logging_config:
        return

    level = str(logging_config.get('level', 'WARNING')).upper()
    if level not in VALID_LOG_LEVELS:
        raise ConfigValidationError(f"logging.level must be one of {VALID_LOG_LEVELS}, got {level}")
