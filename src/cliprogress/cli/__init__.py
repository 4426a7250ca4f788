"""CLI module for cliprogress.

This module provides:
- Main CLI application entry point
- run estimate / run track commands
- config show
"""

from cliprogress.cli.main import app

__all__ = ["app"]
