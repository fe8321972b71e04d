"""
Moves and the precomputed rook-move table.

A move slides one piece any number of squares along a rank or file.
Text notation follows the usual Tablut convention: the origin square, a
dash, then the destination's rank (vertical move) or file (horizontal
move):

    e4-7   e4 to e7
    e4-h   e4 to h4

The long form 'e4-e7' is accepted on input as well.
"""

from dataclasses import dataclass
from typing import Tuple

from .square import FILES, ROOK_RAYS, SQUARE_LIST, Square, parse_square, sq


@dataclass(frozen=True)
class Move:
    """An orthogonal slide from one square to another."""

    from_sq: Square
    to_sq: Square

    def __post_init__(self) -> None:
        if not self.from_sq.is_rook_move(self.to_sq):
            raise ValueError(f"{self.from_sq}-{self.to_sq} is not a rook move")

    @property
    def is_vertical(self) -> bool:
        return self.from_sq.col == self.to_sq.col

    def __str__(self) -> str:
        if self.is_vertical:
            return f"{self.from_sq}-{self.to_sq.row + 1}"
        return f"{self.from_sq}-{FILES[self.to_sq.col]}"

    def __repr__(self) -> str:
        return f"Move({self})"


def _build_moves() -> Tuple[Tuple[Tuple[Move, ...], ...], ...]:
    table = []
    for square in SQUARE_LIST:
        table.append(
            tuple(
                tuple(Move(square, target) for target in ray)
                for ray in ROOK_RAYS[square.index]
            )
        )
    return tuple(table)


# ROOK_MOVES[index][direction] -> moves from that square, nearest first
ROOK_MOVES = _build_moves()


def mv(from_sq: Square, to_sq: Square) -> Move:
    """
    The interned Move from from_sq to to_sq.

    Raises:
        ValueError: if the squares are not on a common rank or file
    """
    direction = from_sq.direction_to(to_sq)
    if direction < 0:
        raise ValueError(f"{from_sq}-{to_sq} is not a rook move")
    distance = from_sq.distance_to(to_sq)
    return ROOK_MOVES[from_sq.index][direction][distance - 1]


def parse_move(text: str) -> Move:
    """
    Parse a move in short ('e4-7', 'e4-h') or long ('e4-e7') notation.

    Raises:
        ValueError: if text is malformed or not an orthogonal move
    """
    text = text.strip().lower()
    origin, sep, dest = text.partition("-")
    if not sep or not dest:
        raise ValueError(f"Invalid move {text!r}")
    from_sq = parse_square(origin)

    if len(dest) == 2:
        to_sq = parse_square(dest)
    elif len(dest) == 1 and dest.isdigit():
        to_sq = sq(from_sq.col, _rank(dest, text))
    elif len(dest) == 1 and dest in FILES:
        to_sq = sq(FILES.index(dest), from_sq.row)
    else:
        raise ValueError(f"Invalid move {text!r}")

    return mv(from_sq, to_sq)


def _rank(char: str, text: str) -> int:
    row = int(char) - 1
    if not 0 <= row < len(FILES):
        raise ValueError(f"Invalid move {text!r}")
    return row
