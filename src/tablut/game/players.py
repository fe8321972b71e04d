"""
Move sources for the turn coordinator.

A player turns the current position into its next move. The coordinator
never needs to know which kind of player it is talking to.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..core import Board, Move, Piece, parse_move
from ..core.piece import SIDE_NAMES
from ..solver import AlphaBetaSearcher, SearchConfig

logger = logging.getLogger(__name__)

QUIT_COMMANDS = ("quit", "resign")


class Player(ABC):
    """Abstract move source for one side."""

    def __init__(self, side: Piece):
        self.side = side.side

    @property
    def name(self) -> str:
        return SIDE_NAMES[self.side]

    @abstractmethod
    def next_move(self, board: Board) -> Optional[Move]:
        """
        Choose a move for self.side on `board`.

        Args:
            board: Current position; must not be modified

        Returns:
            A legal move, or None to resign
        """
        pass


class ManualPlayer(Player):
    """Reads moves in text notation from a line source."""

    def __init__(self, side: Piece, read_line: Callable[[str], str] = input):
        """
        Initialize manual player.

        Args:
            side: Side to play
            read_line: Called with a prompt, returns one line of input;
                raising EOFError ends input
        """
        super().__init__(side)
        self.read_line = read_line

    def next_move(self, board: Board) -> Optional[Move]:
        while True:
            try:
                line = self.read_line(f"{self.name}> ").strip()
            except EOFError:
                return None

            if not line:
                continue
            if line.lower() in QUIT_COMMANDS:
                return None

            try:
                move = parse_move(line)
            except ValueError as e:
                logger.warning(f"{e}")
                continue

            if not board.is_legal(move):
                logger.warning(f"Illegal move: {move}")
                continue
            return move


class AIPlayer(Player):
    """Chooses moves with alpha-beta search."""

    def __init__(self, side: Piece, config: Optional[SearchConfig] = None):
        super().__init__(side)
        self.searcher = AlphaBetaSearcher(self.side, config)

    def next_move(self, board: Board) -> Optional[Move]:
        result = self.searcher.search(board)
        if result.move is not None:
            logger.info(
                f"{self.name} plays {result.move} "
                f"(depth {result.depth}, value {result.value}, {result.nodes:,} nodes)"
            )
        return result.move
