"""Shared board builders for the test suite."""

import pytest

from tablut.core import ATTACKER, DEFENDER, EMPTY, KING, SIZE, Board, parse_square


def build_board(turn=ATTACKER, attackers=(), defenders=(), king=None) -> Board:
    """
    Board with pieces on the given squares (text notation, e.g. 'e5').

    The position is built through Board.from_encoded(), so its history
    starts fresh.
    """
    cells = [EMPTY.char] * (SIZE * SIZE)
    for name in attackers:
        cells[parse_square(name).index] = ATTACKER.char
    for name in defenders:
        cells[parse_square(name).index] = DEFENDER.char
    if king is not None:
        cells[parse_square(king).index] = KING.char
    return Board.from_encoded(turn.char + "".join(cells))


@pytest.fixture
def make_board():
    """Factory fixture wrapping build_board()."""
    return build_board

