"""
Depth-limited minimax search.

Explores every move to a fixed depth with no pruning. Slow, but its result
is the reference the alpha-beta searcher must reproduce, and it shares the
search configuration, evaluator and result types with it.

The position is explored in place: every child is visited inside a
Board.trial() block, so the board is restored before the next sibling.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..core import DEFENDER, Board, Move, Piece
from .evaluation import INFINITY, WIN_VALUE, Evaluator

logger = logging.getLogger(__name__)

# (minimum pieces on board, search depth), most pieces first
DEFAULT_DEPTH_SCHEDULE: Tuple[Tuple[int, int], ...] = (
    (22, 2),
    (13, 3),
    (7, 4),
    (0, 5),
)


@dataclass(frozen=True)
class SearchConfig:
    """
    Search settings.

    depth_schedule maps the number of pieces left on the board to a search
    depth; fewer pieces must never give a shallower search. fixed_depth,
    when set, overrides the schedule.
    """

    depth_schedule: Tuple[Tuple[int, int], ...] = DEFAULT_DEPTH_SCHEDULE
    fixed_depth: Optional[int] = None

    def __post_init__(self) -> None:
        if self.fixed_depth is not None and self.fixed_depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {self.fixed_depth}")
        if not self.depth_schedule:
            raise ValueError("Depth schedule is empty")

        previous_pieces, previous_depth = None, 0
        for pieces, depth in self.depth_schedule:
            if depth < 1:
                raise ValueError(f"Search depth must be at least 1, got {depth}")
            if previous_pieces is not None and pieces >= previous_pieces:
                raise ValueError("Depth schedule must list piece counts in descending order")
            if depth < previous_depth:
                raise ValueError("Depth schedule must not get shallower as pieces are captured")
            previous_pieces, previous_depth = pieces, depth
        if self.depth_schedule[-1][0] != 0:
            raise ValueError("Depth schedule must end with a 0-piece entry")

    def depth_for(self, board: Board) -> int:
        """Search depth for `board`."""
        if self.fixed_depth is not None:
            return self.fixed_depth
        pieces = board.piece_count()
        for min_pieces, depth in self.depth_schedule:
            if pieces >= min_pieces:
                return depth
        return self.depth_schedule[-1][1]


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a top-level search."""

    move: Optional[Move]  # None if the side to move has no legal move
    value: int  # Backed-up value, positive favours the defenders
    depth: int
    nodes: int


class MinimaxSearcher:
    """
    Plain minimax over the tree of legal moves.

    Defenders maximise, attackers minimise. Among moves of equal value the
    first one enumerated is kept.
    """

    def __init__(self, side: Piece, config: Optional[SearchConfig] = None):
        """
        Initialize searcher.

        Args:
            side: Side the searcher plays; selects the heuristic terms
            config: Search settings (default: SearchConfig())
        """
        self.side = side.side
        self.config = config or SearchConfig()
        self.evaluator = Evaluator(self.side)
        self._nodes = 0

    def find_move(self, board: Board) -> Optional[Move]:
        """Best move for the side to move on `board`, or None if there is none."""
        return self.search(board).move

    def search(self, board: Board, depth: Optional[int] = None) -> SearchResult:
        """
        Search `board` without modifying it.

        Args:
            board: Position to search; a private copy is explored
            depth: Search depth (default: chosen by the config)

        Returns:
            SearchResult with the best move and its value
        """
        work = board.copy()
        if depth is None:
            depth = self.config.depth_for(work)
        elif depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")

        self._nodes = 0
        value, move = self._search(work, depth)

        if work.encoded_board() != board.encoded_board():
            raise RuntimeError("Search did not restore the position it explored")

        logger.debug(
            f"{type(self).__name__}: depth {depth}, {self._nodes:,} nodes, "
            f"best {move} ({value})"
        )
        return SearchResult(move=move, value=value, depth=depth, nodes=self._nodes)

    def _search(self, board: Board, depth: int) -> Tuple[int, Optional[Move]]:
        return self._minimax(board, depth)

    def _leaf_value(self, board: Board, depth: int) -> Optional[int]:
        """Static value if the node is a leaf, otherwise None."""
        if depth == 0 or board.winner is not None:
            return self.evaluator.evaluate(board)
        return None

    @staticmethod
    def _stuck_value(board: Board) -> int:
        """A side with no legal move loses."""
        return -WIN_VALUE if board.turn is DEFENDER else WIN_VALUE

    def _minimax(self, board: Board, depth: int) -> Tuple[int, Optional[Move]]:
        self._nodes += 1
        leaf = self._leaf_value(board, depth)
        if leaf is not None:
            return leaf, None

        moves = board.legal_moves(board.turn)
        if not moves:
            return self._stuck_value(board), None

        maximizing = board.turn is DEFENDER
        best = -INFINITY if maximizing else INFINITY
        best_move = None

        for move in moves:
            with board.trial(move):
                value, _ = self._minimax(board, depth - 1)

            if (maximizing and value > best) or (not maximizing and value < best):
                best = value
                best_move = move

        return best, best_move
