"""
Board squares and precomputed geometry.

Squares are interned: there is exactly one Square object per coordinate,
created at import time, so identity and equality agree. Coordinates:

    9 . . . B B B . . .
    8 . . . . B . . . .
    ...
    1 . . . B B B . . .
      a b c d e f g h i

- col 0..8 is file 'a'..'i', row 0..8 is rank '1'..'9'
- index = row * SIZE + col (row-major, 0..80)
- directions: 0 = north (row + 1), 1 = east, 2 = south, 3 = west
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

SIZE = 9

# (dcol, drow) for north, east, south, west
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

FILES = "abcdefghi"


@dataclass(frozen=True)
class Square:
    """A single cell of the 9x9 board. Use sq() rather than the constructor."""

    col: int
    row: int

    @property
    def index(self) -> int:
        """Row-major index, 0..80."""
        return self.row * SIZE + self.col

    @property
    def is_edge(self) -> bool:
        """True for squares on the outer ring of the board."""
        return self.col in (0, SIZE - 1) or self.row in (0, SIZE - 1)

    def rook_move(self, direction: int, steps: int = 1) -> Optional["Square"]:
        """
        The square `steps` away in `direction`.

        Args:
            direction: 0 = north, 1 = east, 2 = south, 3 = west
            steps: Distance to travel

        Returns:
            The square reached, or None if it is off the board
        """
        dcol, drow = DIRECTIONS[direction]
        col = self.col + dcol * steps
        row = self.row + drow * steps
        if exists(col, row):
            return sq(col, row)
        return None

    def is_rook_move(self, other: "Square") -> bool:
        """True if other is reachable by a straight orthogonal slide."""
        return self != other and (self.col == other.col or self.row == other.row)

    def direction_to(self, other: "Square") -> int:
        """Direction of a rook move towards other, or -1 if there is none."""
        if not self.is_rook_move(other):
            return -1
        if self.col == other.col:
            return 0 if other.row > self.row else 2
        return 1 if other.col > self.col else 3

    def distance_to(self, other: "Square") -> int:
        """Manhattan distance."""
        return abs(self.col - other.col) + abs(self.row - other.row)

    def adjacent(self, other: Optional["Square"]) -> bool:
        """True if other is one orthogonal step away."""
        return other is not None and self.distance_to(other) == 1

    def between(self, other: "Square") -> Optional["Square"]:
        """
        The midpoint of self and other when they lie two steps apart on a
        rank or file, otherwise None.
        """
        if not self.is_rook_move(other) or self.distance_to(other) != 2:
            return None
        return sq((self.col + other.col) // 2, (self.row + other.row) // 2)

    def flanks(self, along: "Square") -> Tuple[Optional["Square"], Optional["Square"]]:
        """
        Neighbours of self perpendicular to the line from `along` to self.

        `along` must be orthogonally adjacent to self. For a victim square
        sandwiched on a file these are its east/west neighbours, for one
        sandwiched on a rank its north/south neighbours.
        """
        direction = along.direction_to(self)
        if direction < 0:
            raise ValueError(f"{along} and {self} are not on a line")
        return (
            self.rook_move((direction + 1) % 4),
            self.rook_move((direction + 3) % 4),
        )

    def neighbors(self) -> List["Square"]:
        """Orthogonal neighbours that are on the board, in direction order."""
        return [s for s in (self.rook_move(d) for d in range(4)) if s is not None]

    def __str__(self) -> str:
        return f"{FILES[self.col]}{self.row + 1}"

    def __repr__(self) -> str:
        return f"Square({self})"


def exists(col: int, row: int) -> bool:
    """True if (col, row) lies on the board."""
    return 0 <= col < SIZE and 0 <= row < SIZE


# Interned squares in index order
SQUARE_LIST: Tuple[Square, ...] = tuple(
    Square(col, row) for row in range(SIZE) for col in range(SIZE)
)


def sq(col: int, row: int) -> Square:
    """
    The unique Square at (col, row).

    Raises:
        ValueError: if the coordinate is off the board
    """
    if not exists(col, row):
        raise ValueError(f"Square ({col}, {row}) is off the board")
    return SQUARE_LIST[row * SIZE + col]


def parse_square(text: str) -> Square:
    """
    Parse a square in file/rank notation, e.g. 'e5'.

    Raises:
        ValueError: if text is not a valid square
    """
    text = text.strip().lower()
    if len(text) != 2 or text[0] not in FILES or not text[1].isdigit():
        raise ValueError(f"Invalid square {text!r}")
    row = int(text[1]) - 1
    if not 0 <= row < SIZE:
        raise ValueError(f"Invalid square {text!r}")
    return sq(FILES.index(text[0]), row)


def _build_rays() -> Tuple[Tuple[Tuple[Square, ...], ...], ...]:
    """For every square, the four rays of squares ordered by distance."""
    rays = []
    for square in SQUARE_LIST:
        per_direction = []
        for direction in range(4):
            ray = []
            steps = 1
            target = square.rook_move(direction, steps)
            while target is not None:
                ray.append(target)
                steps += 1
                target = square.rook_move(direction, steps)
            per_direction.append(tuple(ray))
        rays.append(tuple(per_direction))
    return tuple(rays)


# ROOK_RAYS[index][direction] -> squares reachable in that direction
ROOK_RAYS = _build_rays()

# Throne (castle) and its four neighbours
THRONE = sq(4, 4)
NTHRONE = sq(4, 5)
ETHRONE = sq(5, 4)
STHRONE = sq(4, 3)
WTHRONE = sq(3, 4)
THRONE_NEIGHBORS: Tuple[Square, ...] = (NTHRONE, ETHRONE, STHRONE, WTHRONE)
