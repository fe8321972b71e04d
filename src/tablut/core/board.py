"""
Mutable Tablut position and rule engine.

A Board holds:
- 81 cells (row-major, see square.py)
- Side to move, move counter and optional move limit
- Cached winner and repeated-position flag
- Snapshot history for exact repetition detection
- An undo log for O(1) reversal of the last move

Rules implemented:
- Pieces slide orthogonally over empty squares; only the king may land on
  the throne (anyone may pass over it while it is empty)
- A piece is captured when sandwiched between two hostile squares; the
  empty throne is hostile to both sides, the king-occupied throne is hostile
  to defenders only when the other three throne neighbours hold attackers
- The king on or next to the throne must be surrounded on all four sides
- The king reaching any edge square wins for the defenders
- A repeated (grid, side to move) pair wins for the side to move
- Exhausting the move limit loses for the side to move
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .hash import piece_key, side_key
from .move import ROOK_MOVES, Move, mv
from .piece import ATTACKER, DEFENDER, EMPTY, KING, Piece
from .square import (
    FILES,
    SIZE,
    SQUARE_LIST,
    THRONE,
    THRONE_NEIGHBORS,
    Square,
    sq,
)

# Initial positions of attackers: the four edge midpoints
INITIAL_ATTACKERS: Tuple[Square, ...] = (
    sq(0, 3), sq(0, 4), sq(0, 5), sq(1, 4),
    sq(8, 3), sq(8, 4), sq(8, 5), sq(7, 4),
    sq(3, 0), sq(4, 0), sq(5, 0), sq(4, 1),
    sq(3, 8), sq(4, 8), sq(5, 8), sq(4, 7),
)

# Initial positions of the defenders around the throne
INITIAL_DEFENDERS: Tuple[Square, ...] = (
    sq(4, 5), sq(5, 4), sq(4, 3), sq(3, 4),
    sq(4, 6), sq(4, 2), sq(2, 4), sq(6, 4),
)


@dataclass
class UndoRecord:
    """Everything needed to take back one applied move."""

    move: Move
    winner: Optional[Piece]  # Winner before the move
    repeated: bool  # Repetition flag before the move
    captured: List[Tuple[Square, Piece]] = field(default_factory=list)


class Board:
    """
    The state of a Tablut game.

    Boards are mutated only through make_move(), undo(), trial() and the
    set-up helpers. Use copy() to get an independent board, e.g. for search.
    """

    def __init__(self) -> None:
        self.init()

    def init(self) -> None:
        """Reset to the initial position: attackers to move, no move limit."""
        self._cells: List[Piece] = [EMPTY] * (SIZE * SIZE)
        self._king: Optional[Square] = None
        self._key = 0
        self._turn = ATTACKER
        self._key ^= side_key(ATTACKER)
        self._winner: Optional[Piece] = None
        self._repeated = False
        self._move_limit = 0

        for square in INITIAL_ATTACKERS:
            self._set(square, ATTACKER)
        for square in INITIAL_DEFENDERS:
            self._set(square, DEFENDER)
        self._set(THRONE, KING)

        self.clear_undo()

    @classmethod
    def from_encoded(cls, encoded: str) -> "Board":
        """
        Build a board from the output of encoded_board().

        The result has an empty history and no move limit.

        Raises:
            ValueError: if the string has the wrong length, unknown piece
                codes, an invalid side to move or more than one king
        """
        expected = SIZE * SIZE + 1
        if len(encoded) != expected:
            raise ValueError(
                f"Encoded board length {len(encoded)} doesn't match expected {expected}"
            )
        turn = Piece.from_char(encoded[0])
        if turn not in (ATTACKER, DEFENDER):
            raise ValueError(f"Invalid side to move {encoded[0]!r}")
        pieces = [Piece.from_char(c) for c in encoded[1:]]
        if pieces.count(KING) > 1:
            raise ValueError("A board may hold at most one king")

        board = cls()
        board._cells = [EMPTY] * (SIZE * SIZE)
        board._king = None
        board._key = side_key(turn)
        board._turn = turn
        for square, piece in zip(SQUARE_LIST, pieces):
            board._set(square, piece)
        board.clear_undo()
        return board

    def copy(self) -> "Board":
        """An independent deep copy, history and undo log included."""
        other = Board.__new__(Board)
        other._cells = list(self._cells)
        other._king = self._king
        other._key = self._key
        other._turn = self._turn
        other._winner = self._winner
        other._repeated = self._repeated
        other._move_count = self._move_count
        other._move_limit = self._move_limit
        other._history = list(self._history)
        other._keys = list(self._keys)
        other._seen = dict(self._seen)
        other._log = list(self._log)
        return other

    # ------------------------------------------------------------------
    # Queries

    @property
    def turn(self) -> Piece:
        """Side to move (ATTACKER or DEFENDER)."""
        return self._turn

    @property
    def winner(self) -> Optional[Piece]:
        """Winning side, or None while the game is in progress."""
        return self._winner

    @property
    def repeated_position(self) -> bool:
        """True iff the game ended by repeating a position."""
        return self._repeated

    @property
    def move_count(self) -> int:
        """Moves applied (and not undone) since the history was last cleared."""
        return self._move_count

    @property
    def move_limit(self) -> int:
        return self._move_limit

    @property
    def limit_reached(self) -> bool:
        """True once both sides have used up a set move limit."""
        return bool(self._move_limit) and self._move_count >= 2 * self._move_limit

    @property
    def zobrist_key(self) -> int:
        return self._key

    def get(self, square: Square) -> Piece:
        return self._cells[square.index]

    def king_position(self) -> Optional[Square]:
        """Square of the king, or None once it has been captured."""
        return self._king

    def count(self, piece: Piece) -> int:
        """Number of cells holding exactly `piece`."""
        return self._cells.count(piece)

    def piece_count(self) -> int:
        """Total number of pieces on the board, king included."""
        return len(self._cells) - self._cells.count(EMPTY)

    def piece_locations(self, side: Piece) -> List[Square]:
        """Squares holding pieces of `side` (the king counts as a defender)."""
        side = side.side
        if side is EMPTY:
            raise ValueError("EMPTY is not a side")
        cells = self._cells
        return [s for s in SQUARE_LIST if cells[s.index].side is side]

    # ------------------------------------------------------------------
    # Legality

    def is_legal(
        self, move_or_from: Union[Move, Square], to: Optional[Square] = None
    ) -> bool:
        """
        Return True iff the move is legal in the current position.

        Accepts a Move or a (from, to) pair of squares.
        """
        if to is None:
            from_sq, to_sq = move_or_from.from_sq, move_or_from.to_sq
        else:
            from_sq, to_sq = move_or_from, to

        if self._winner is not None:
            return False
        if not from_sq.is_rook_move(to_sq):
            return False
        piece = self.get(from_sq)
        if piece is EMPTY or piece.side is not self._turn:
            return False
        if to_sq == THRONE and piece is not KING:
            return False
        return self._is_unblocked(from_sq, to_sq)

    def _is_unblocked(self, from_sq: Square, to_sq: Square) -> bool:
        """True if every square after from_sq up to and including to_sq is empty."""
        direction = from_sq.direction_to(to_sq)
        distance = from_sq.distance_to(to_sq)
        for move in ROOK_MOVES[from_sq.index][direction][:distance]:
            if self._cells[move.to_sq.index] is not EMPTY:
                return False
        return True

    def legal_moves(self, side: Piece) -> List[Move]:
        """
        All legal moves for `side`, ignoring whose turn it is.

        Moves are listed by origin square index, then direction (north,
        east, south, west), then distance. Search relies on this order being
        stable. Returns an empty list once the game has a winner.
        """
        if self._winner is not None:
            return []

        cells = self._cells
        legal = []
        for square in self.piece_locations(side):
            piece = cells[square.index]
            for ray in ROOK_MOVES[square.index]:
                for move in ray:
                    if cells[move.to_sq.index] is not EMPTY:
                        break
                    # Empty throne may be crossed but only the king stops on it
                    if move.to_sq is THRONE and piece is not KING:
                        continue
                    legal.append(move)
        return legal

    def has_move(self, side: Piece) -> bool:
        """Return True iff `side` has at least one legal move."""
        return bool(self.legal_moves(side))

    # ------------------------------------------------------------------
    # Move application

    def make_move(
        self, move_or_from: Union[Move, Square], to: Optional[Square] = None
    ) -> bool:
        """
        Apply a move for the side to move.

        Illegal moves are ignored. If a move limit is set and has been
        reached, the side to move forfeits instead of moving.

        Returns:
            True if the move (or forfeit) was processed, False if it was
            rejected as illegal
        """
        move = move_or_from if to is None else mv(move_or_from, to)
        if not self.is_legal(move):
            return False

        if self.limit_reached:
            self._declare(self._turn.opponent())
            return True

        record = UndoRecord(move=move, winner=self._winner, repeated=self._repeated)
        self._set(move.to_sq, self.get(move.from_sq))
        self._set(move.from_sq, EMPTY)

        # The throne takes part in every capture check as a virtual occupant
        partners = self.piece_locations(self._turn)
        if THRONE not in partners:
            partners.append(THRONE)
        for partner in partners:
            self._capture(move.to_sq, partner, record)

        self._move_count += 1
        self._flip_turn()

        snapshot = self.encoded_board()
        if self._is_repeat(snapshot):
            if self._winner is None:
                self._repeated = True
                self._declare(self._turn)
        self._push_snapshot(snapshot)

        if self._king is not None and self._king.is_edge:
            self._declare(DEFENDER)

        self._log.append(record)
        return True

    def _capture(self, sq0: Square, sq2: Square, record: UndoRecord) -> None:
        """
        Capture the piece between sq0 and sq2 if the sandwich rules allow,
        assuming a piece just moved to sq0.
        """
        sq1 = sq0.between(sq2)
        if sq1 is None:
            return
        victim = self.get(sq1)
        if victim is EMPTY:
            return

        if victim is KING and (sq1 == THRONE or sq1 in THRONE_NEIGHBORS):
            # Four-sided surround: the capturing line plus both flanks
            flank1, flank2 = sq1.flanks(sq0)
            if (
                self._hostile(sq0, sq1)
                and self._hostile(sq2, sq1)
                and self._hostile(flank1, sq1)
                and self._hostile(flank2, sq1)
            ):
                self._remove(sq1, record)
            return

        if self._hostile(sq0, sq1) and self._hostile(sq2, sq1):
            self._remove(sq1, record)

    def _hostile(self, square: Optional[Square], victim_sq: Square) -> bool:
        """Return True iff `square` acts as a capturing jaw against the piece on victim_sq."""
        if square is None:
            return False
        victim = self.get(victim_sq).side
        occupant = self.get(square)

        if square == THRONE:
            if occupant is EMPTY:
                return True
            if occupant is KING and victim is DEFENDER:
                return all(
                    self.get(n) is ATTACKER for n in THRONE_NEIGHBORS if n != victim_sq
                )

        return occupant is not EMPTY and occupant.side is not victim

    def _remove(self, square: Square, record: UndoRecord) -> None:
        piece = self.get(square)
        record.captured.append((square, piece))
        self._set(square, EMPTY)
        if piece is KING:
            self._declare(ATTACKER)

    def _declare(self, side: Piece) -> None:
        """Record `side` as winner unless the game is already decided."""
        if self._winner is None:
            self._winner = side

    # ------------------------------------------------------------------
    # Undo

    def undo(self) -> None:
        """
        Take back the last move. Has no effect on the initial position.

        Clears the repetition flag but keeps a cached winner.
        """
        if self._log:
            self._revert(self._log.pop())
            self._repeated = False

    @contextmanager
    def trial(self, move: Move) -> Iterator[bool]:
        """
        Apply `move` for the duration of a with-block.

        On exit the move is reverted completely, winner and repetition flag
        included, whichever way the block is left. Yields whether the move
        was processed (see make_move()). A block that leaves extra moves
        applied raises RuntimeError unless it is already raising.
        """
        winner, repeated = self._winner, self._repeated
        depth = len(self._log)
        applied = self.make_move(move)
        pushed = len(self._log) - depth
        try:
            yield applied
        finally:
            balanced = len(self._log) == depth + pushed
            if balanced:
                if pushed:
                    self._revert(self._log.pop())
                self._winner = winner
                self._repeated = repeated
        if not balanced:
            raise RuntimeError(
                f"Unbalanced trial of {move}: undo log has {len(self._log)} "
                f"entries, expected {depth + pushed}"
            )

    def _revert(self, record: UndoRecord) -> None:
        self._pop_snapshot()
        move = record.move
        self._set(move.from_sq, self.get(move.to_sq))
        self._set(move.to_sq, EMPTY)
        for square, piece in reversed(record.captured):
            self._set(square, piece)
        self._move_count -= 1
        self._flip_turn()

    def clear_undo(self) -> None:
        """
        Forget history and reset the move counter. Does not modify the
        current position or win status.
        """
        self._move_count = 0
        self._history: List[str] = []
        self._keys: List[int] = []
        self._seen: Dict[int, int] = {}
        self._log: List[UndoRecord] = []
        self._push_snapshot(self.encoded_board())

    # ------------------------------------------------------------------
    # Configuration & set-up

    def set_move_limit(self, n: int) -> None:
        """
        Limit each side to n moves from now on; 0 removes the limit.

        Raises:
            ValueError: if n is negative or already exhausted
        """
        if n < 0:
            raise ValueError(f"Move limit must be non-negative, got {n}")
        if n and 2 * n <= self._move_count:
            raise ValueError(
                f"Move limit {n} already exceeded ({self._move_count} moves made)"
            )
        self._move_limit = n

    def put(self, piece: Piece, square: Square) -> None:
        """
        Set-up helper: place `piece` on `square` and restart the history.

        Raises:
            ValueError: if placing a second king
        """
        if piece is KING and self._king is not None and self._king != square:
            raise ValueError(f"King already on {self._king}")
        self._set(square, piece)
        self.clear_undo()

    # ------------------------------------------------------------------
    # Internals

    def _set(self, square: Square, piece: Piece) -> None:
        index = square.index
        old = self._cells[index]
        self._key ^= piece_key(index, old) ^ piece_key(index, piece)
        self._cells[index] = piece
        if piece is KING:
            self._king = square
        elif old is KING and self._king == square:
            self._king = None

    def _flip_turn(self) -> None:
        self._key ^= side_key(self._turn)
        self._turn = self._turn.opponent()
        self._key ^= side_key(self._turn)

    def _is_repeat(self, snapshot: str) -> bool:
        """Exact (grid, side to move) match against recorded snapshots."""
        if not self._seen.get(self._key):
            return False
        return any(
            key == self._key and earlier == snapshot
            for key, earlier in zip(self._keys, self._history)
        )

    def _push_snapshot(self, snapshot: str) -> None:
        self._history.append(snapshot)
        self._keys.append(self._key)
        self._seen[self._key] = self._seen.get(self._key, 0) + 1

    def _pop_snapshot(self) -> None:
        self._history.pop()
        key = self._keys.pop()
        self._seen[key] -= 1
        if not self._seen[key]:
            del self._seen[key]

    # ------------------------------------------------------------------
    # Text forms

    def encoded_board(self) -> str:
        """
        Side to move followed by one character per square in index order.

        E.g. 'B---BBB---...' for the initial position.
        """
        return self._turn.char + "".join(p.char for p in self._cells)

    def history(self) -> List[str]:
        """Encoded snapshots from the last clear up to the current position."""
        return list(self._history)

    def __str__(self) -> str:
        return self.to_string(coordinates=True)

    def to_string(self, coordinates: bool = True) -> str:
        """
        Text diagram, rank 9 at the top. With coordinates, ranks are shown
        on the left and files along the bottom.
        """
        lines = []
        for row in range(SIZE - 1, -1, -1):
            prefix = f"{row + 1:>2}" if coordinates else "  "
            cells = " ".join(self._cells[row * SIZE + col].char for col in range(SIZE))
            lines.append(f"{prefix} {cells}")
        if coordinates:
            lines.append("   " + " ".join(FILES))
        return "\n".join(lines) + "\n"
