"""Paced replay and the single-writer maze session."""

from .driver import ReplayDriver, speed_to_interval
from .session import MazeSession, create_session

__all__ = [
    'ReplayDriver',
    'speed_to_interval',
    'MazeSession',
    'create_session'
]
