"""
Turn coordinator.

Alternates two players on a live board until the game is decided:
- The rule engine decides king escape, king capture and repetition
- The side to move loses once the move limit is used up, without being
  asked for a move
- A side with no legal move, or whose player resigns, loses
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..core import ATTACKER, DEFENDER, Board, Move, Piece
from ..core.piece import SIDE_NAMES
from .players import Player

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Outcome of a finished game."""

    winner: Piece
    reason: str  # "king escaped", "king captured", "repetition", ...
    moves: List[Move] = field(default_factory=list)
    repeated: bool = False

    def __str__(self) -> str:
        return f"{SIDE_NAMES[self.winner].capitalize()} wins ({self.reason})."


class Game:
    """Runs one game between two players."""

    def __init__(
        self,
        attacker: Player,
        defender: Player,
        move_limit: int = 0,
        board: Optional[Board] = None,
        on_move: Optional[Callable[[Board, Move], None]] = None,
    ):
        """
        Initialize game.

        Args:
            attacker: Player for the attacking (black) side
            defender: Player for the defending (white) side
            move_limit: Moves allowed per side (0 = unlimited)
            board: Starting position (default: initial layout)
            on_move: Called after every applied move, e.g. to redraw
        """
        if attacker.side is not ATTACKER or defender.side is not DEFENDER:
            raise ValueError("Players do not match their sides")
        self.players: Dict[Piece, Player] = {ATTACKER: attacker, DEFENDER: defender}
        self.board = board if board is not None else Board()
        self.board.set_move_limit(move_limit)
        self.on_move = on_move
        self.moves: List[Move] = []

    def play(self) -> GameResult:
        """Play until a winner is known and return the result."""
        board = self.board

        while board.winner is None:
            side = board.turn
            if board.limit_reached:
                return self._finish(side.opponent(), "move limit")
            if not board.has_move(side):
                return self._finish(side.opponent(), f"{SIDE_NAMES[side]} has no legal move")

            move = self.players[side].next_move(board)
            if move is None:
                return self._finish(side.opponent(), f"{SIDE_NAMES[side]} resigned")

            if not board.make_move(move):
                raise RuntimeError(f"{SIDE_NAMES[side]} player returned illegal move {move}")

            self.moves.append(move)
            logger.debug(f"{len(self.moves)}. {SIDE_NAMES[side]} {move}")
            if self.on_move is not None:
                self.on_move(board, move)

        return self._finish(board.winner, self._reason())

    def _reason(self) -> str:
        board = self.board
        if board.repeated_position:
            return "repetition"
        king = board.king_position()
        if king is None:
            return "king captured"
        return "king escaped"

    def _finish(self, winner: Piece, reason: str) -> GameResult:
        result = GameResult(
            winner=winner,
            reason=reason,
            moves=list(self.moves),
            repeated=self.board.repeated_position,
        )
        logger.info(f"{result} after {len(self.moves)} moves")
        return result
