"""Command-line interface for the maze search demonstrator."""

from .main import create_parser, main, main_cli

__all__ = ['create_parser', 'main', 'main_cli']
