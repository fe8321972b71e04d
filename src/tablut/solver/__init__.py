"""Adversarial search: static evaluation, minimax and alpha-beta."""

from .evaluation import Evaluator, WIN_VALUE, WILL_WIN_VALUE, INFINITY
from .minimax import MinimaxSearcher, SearchConfig, SearchResult, DEFAULT_DEPTH_SCHEDULE
from .alphabeta import AlphaBetaSearcher

__all__ = [
    "Evaluator",
    "WIN_VALUE",
    "WILL_WIN_VALUE",
    "INFINITY",
    "MinimaxSearcher",
    "SearchConfig",
    "SearchResult",
    "DEFAULT_DEPTH_SCHEDULE",
    "AlphaBetaSearcher",
]
