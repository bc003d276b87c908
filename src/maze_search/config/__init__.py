"""Configuration management for the maze search demonstrator.

This module provides Hydra-based configuration management with grouped
parameters and runtime override capabilities.
"""

from .config_manager import (
    ConfigContext, ConfigManager, default_config_dir, get_config, get_parameter, load_config,
    reset_config
)
from .validators import validate_config, ConfigValidationError

__all__ = [
    'ConfigContext',
    'ConfigManager',
    'default_config_dir',
    'get_config',
    'get_parameter',
    'load_config',
    'reset_config',
    'validate_config',
    'ConfigValidationError'
]
