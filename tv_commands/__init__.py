"""
Tutorial Video CLI Commands

All command modules for the tv CLI tool.
Each module provides functions and argument parsing for a specific command group.
"""

from . import video, utils

__all__ = ['video', 'utils']
