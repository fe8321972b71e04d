"""
Zobrist hashing for fast repetition detection.

Zobrist hashing uses pre-generated random numbers to create near-unique
hashes for positions. A key is the XOR of one random number per occupied
(square, piece) pair plus one for the side to move, so it can be updated
incrementally as pieces are placed and removed.

Hash equality is only a filter: the board confirms every hit by comparing
full snapshots, so a collision can never produce a false repetition.
"""

import random
from typing import Dict, Tuple

from .piece import ATTACKER, DEFENDER, KING, Piece
from .square import SQUARE_LIST

DEFAULT_SEED = 42

# Global Zobrist table (initialized once per process)
_zobrist_table: Dict[Tuple[int, Piece], int] = {}
_zobrist_side: Dict[Piece, int] = {}


def init_zobrist_table(seed: int = DEFAULT_SEED) -> None:
    """
    Initialize the Zobrist table with random 64-bit numbers.

    Keys computed before and after re-initialisation are not comparable, so
    this should only be called before any Board is created.

    Args:
        seed: Random seed for reproducibility
    """
    global _zobrist_table, _zobrist_side

    rng = random.Random(seed)
    table = {}

    # EMPTY squares contribute nothing
    for square in SQUARE_LIST:
        for piece in (ATTACKER, DEFENDER, KING):
            table[(square.index, piece)] = rng.getrandbits(64)

    _zobrist_table = table
    _zobrist_side = {ATTACKER: rng.getrandbits(64), DEFENDER: rng.getrandbits(64)}


def piece_key(index: int, piece: Piece) -> int:
    """Key contribution of `piece` standing on square `index`."""
    if not _zobrist_table:
        init_zobrist_table()
    if piece is Piece.EMPTY:
        return 0
    return _zobrist_table[(index, piece)]


def side_key(side: Piece) -> int:
    """Key contribution of `side` being the side to move."""
    if not _zobrist_side:
        init_zobrist_table()
    return _zobrist_side[side]


def zobrist_hash(cells, turn: Piece) -> int:
    """
    Compute the Zobrist key of a full position from scratch.

    Args:
        cells: Sequence of 81 pieces in square index order
        turn: Side to move

    Returns:
        64-bit hash value
    """
    h = 0
    for index, piece in enumerate(cells):
        if piece is not Piece.EMPTY:  # Optimization: skip empty squares
            h ^= piece_key(index, piece)
    h ^= side_key(turn)
    return h
