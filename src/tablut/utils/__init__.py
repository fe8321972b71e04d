"""Utility modules for the Tablut engine."""

from .rich_display import GameDisplay, render_board, setup_rich_logging

__all__ = [
    "GameDisplay",
    "render_board",
    "setup_rich_logging",
]
