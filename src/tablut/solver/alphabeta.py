"""
Minimax search with alpha-beta pruning.

Same tree, evaluator and tie policy as MinimaxSearcher; siblings are cut
off once the window closes (beta <= alpha). Because the best move is only
replaced on strict improvement, the root move and value match an
exhaustive minimax search of the same depth.
"""

from typing import Optional, Tuple

from ..core import DEFENDER, Board, Move
from .evaluation import INFINITY
from .minimax import MinimaxSearcher


class AlphaBetaSearcher(MinimaxSearcher):
    """Depth-adaptive alpha-beta searcher used by the AI player."""

    def _search(self, board: Board, depth: int) -> Tuple[int, Optional[Move]]:
        return self._alphabeta(board, depth, -INFINITY, INFINITY)

    def _alphabeta(
        self, board: Board, depth: int, alpha: float, beta: float
    ) -> Tuple[int, Optional[Move]]:
        """
        Value of `board` searched `depth` plies deep within (alpha, beta).

        Returns:
            (value, best_move); best_move is None at leaves
        """
        self._nodes += 1
        leaf = self._leaf_value(board, depth)
        if leaf is not None:
            return leaf, None

        moves = board.legal_moves(board.turn)
        if not moves:
            return self._stuck_value(board), None

        best_move = None
        if board.turn is DEFENDER:
            best = -INFINITY
            for move in moves:
                with board.trial(move):
                    value, _ = self._alphabeta(board, depth - 1, alpha, beta)
                if value > best:
                    best = value
                    best_move = move
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
        else:
            best = INFINITY
            for move in moves:
                with board.trial(move):
                    value, _ = self._alphabeta(board, depth - 1, alpha, beta)
                if value < best:
                    best = value
                    best_move = move
                beta = min(beta, value)
                if beta <= alpha:
                    break

        return best, best_move
