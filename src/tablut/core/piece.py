"""
Piece kinds and side ownership.

Tablut has two sides:
- Attackers (black), 16 pieces, move first
- Defenders (white), 8 pieces plus the king

The king belongs to the defender side for every ownership question
(whose turn, who captures whom). Only the capture rules around the
throne treat the king differently from an ordinary defender.
"""

from enum import Enum


class Piece(Enum):
    """A square's contents. The value is the one-character text code."""

    EMPTY = "-"
    ATTACKER = "B"
    DEFENDER = "W"
    KING = "K"

    @property
    def side(self) -> "Piece":
        """Owning side: KING maps to DEFENDER, everything else to itself."""
        if self is Piece.KING:
            return Piece.DEFENDER
        return self

    def opponent(self) -> "Piece":
        """The opposing side (EMPTY has no opponent and maps to itself)."""
        side = self.side
        if side is Piece.ATTACKER:
            return Piece.DEFENDER
        if side is Piece.DEFENDER:
            return Piece.ATTACKER
        return Piece.EMPTY

    @property
    def char(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, char: str) -> "Piece":
        """
        Look up a piece by its text code.

        Raises:
            ValueError: if char is not one of '-', 'B', 'W', 'K'
        """
        try:
            return cls(char.upper())
        except ValueError:
            raise ValueError(f"Unknown piece code {char!r}") from None

    def __str__(self) -> str:
        return self.value


EMPTY = Piece.EMPTY
ATTACKER = Piece.ATTACKER
DEFENDER = Piece.DEFENDER
KING = Piece.KING

# Side codes used as the first character of an encoded board
SIDE_NAMES = {ATTACKER: "black", DEFENDER: "white"}
