"""Players and turn coordination."""

from .players import Player, ManualPlayer, AIPlayer
from .controller import Game, GameResult

__all__ = [
    "Player",
    "ManualPlayer",
    "AIPlayer",
    "Game",
    "GameResult",
]
