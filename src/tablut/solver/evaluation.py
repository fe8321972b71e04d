"""
Static evaluation of Tablut positions.

Scores are from the defenders' point of view: positive favours the king's
side, negative the attackers. The heuristic terms are computed for one
evaluated side (the side the AI plays) and signed so that what is good for
the attackers is always negative:

- Terminal overrides (king on edge, king captured, king escape next move)
- Material, defenders weighted above attackers
- Encirclement of the evaluated side's pieces, the king counted heavily
- Attacker pieces on the throne neighbours or the edge
- Moves that land next to the king
- Moves that land next to enemy pieces (capture threats)
"""

from typing import List

from ..core import ATTACKER, DEFENDER, EMPTY, KING, ROOK_MOVES, THRONE_NEIGHBORS, Board, Move, Piece

# A position-score magnitude indicating a win
WIN_VALUE = 2**31 - 1 - 20
# A magnitude indicating a forced win next move. Smaller than WIN_VALUE so
# that actual wins are not put off.
WILL_WIN_VALUE = 2**31 - 1 - 40
# Search bound only, never returned as a score
INFINITY = float("inf")

ATTACKER_MATERIAL = 9
DEFENDER_MATERIAL = 16

SURROUND_WEIGHT = 200
KING_SURROUND_FACTOR = 10
THRONE_WEIGHT = 200
EDGE_WEIGHT = 200
CAPTURE_WEIGHT = 1000
KING_PRESSURE_WEIGHT = {ATTACKER: 1000 * 1000, DEFENDER: 1000 * 10}


def terminal_value(winner: Piece) -> int:
    """Score of a decided game."""
    return WIN_VALUE if winner.side is DEFENDER else -WIN_VALUE


def king_can_escape(board: Board) -> bool:
    """True if the king has an unobstructed slide to an edge square."""
    king = board.king_position()
    if king is None:
        return False
    for ray in ROOK_MOVES[king.index]:
        for move in ray:
            if board.get(move.to_sq) is not EMPTY:
                break
            if move.to_sq.is_edge:
                return True
    return False


def is_surrounded(board: Board, square) -> bool:
    """True if an enemy piece stands orthogonally next to `square`."""
    me = board.get(square).side
    return any(board.get(n).side is me.opponent() for n in square.neighbors())


class Evaluator:
    """
    Heuristic evaluator for one side.

    The side changes which heuristic terms are counted, not the sign
    convention of the result.
    """

    def __init__(self, side: Piece):
        if side.side is EMPTY:
            raise ValueError("Evaluator needs ATTACKER or DEFENDER")
        self.side = side.side
        self.sign = 1 if self.side is DEFENDER else -1

    def evaluate(self, board: Board) -> int:
        """Score `board` from the defenders' point of view."""
        if board.winner is not None:
            return terminal_value(board.winner)

        king = board.king_position()
        if king is None:
            return -WIN_VALUE
        if king.is_edge:
            return WIN_VALUE
        if board.turn is DEFENDER and king_can_escape(board):
            return WILL_WIN_VALUE

        moves = board.legal_moves(self.side)

        score = self.material(board)
        score += self.encirclement(board)
        score += self.sign * KING_PRESSURE_WEIGHT[self.side] * self.king_pressure(board, moves)
        score += self.sign * CAPTURE_WEIGHT * self.capture_threats(board, moves)
        return score

    @staticmethod
    def material(board: Board) -> int:
        defenders = board.count(DEFENDER) + board.count(KING)
        return DEFENDER_MATERIAL * defenders - ATTACKER_MATERIAL * board.count(ATTACKER)

    def encirclement(self, board: Board) -> int:
        """
        Penalty for the evaluated side's pieces that touch an enemy, plus the
        attacker-only penalties for blocking the throne and hugging the edge.
        """
        surrounded = 0
        edge = 0
        for square in board.piece_locations(self.side):
            if is_surrounded(board, square):
                surrounded += KING_SURROUND_FACTOR if board.get(square) is KING else 1
            if square.is_edge:
                edge += 1

        score = -self.sign * SURROUND_WEIGHT * surrounded

        throne = sum(1 for s in THRONE_NEIGHBORS if board.get(s) is ATTACKER)
        score += THRONE_WEIGHT * throne

        if self.side is ATTACKER:
            score += EDGE_WEIGHT * edge
        return score

    @staticmethod
    def king_pressure(board: Board, moves: List[Move]) -> int:
        """Number of moves that land next to the king."""
        king = board.king_position()
        return sum(1 for move in moves if move.to_sq.adjacent(king))

    @staticmethod
    def capture_threats(board: Board, moves: List[Move]) -> int:
        """For each move, the number of enemy pieces next to its destination."""
        threats = 0
        for move in moves:
            enemy = board.get(move.from_sq).opponent()
            for n in move.to_sq.neighbors():
                if board.get(n).side is enemy:
                    threats += 1
        return threats
