"""Core board representation and rules."""

from .piece import Piece, EMPTY, ATTACKER, DEFENDER, KING
from .square import (
    Square,
    SIZE,
    SQUARE_LIST,
    ROOK_RAYS,
    THRONE,
    THRONE_NEIGHBORS,
    sq,
    parse_square,
)
from .move import Move, ROOK_MOVES, mv, parse_move
from .hash import zobrist_hash, init_zobrist_table
from .board import Board, INITIAL_ATTACKERS, INITIAL_DEFENDERS

__all__ = [
    "Piece",
    "EMPTY",
    "ATTACKER",
    "DEFENDER",
    "KING",
    "Square",
    "SIZE",
    "SQUARE_LIST",
    "ROOK_RAYS",
    "THRONE",
    "THRONE_NEIGHBORS",
    "sq",
    "parse_square",
    "Move",
    "ROOK_MOVES",
    "mv",
    "parse_move",
    "zobrist_hash",
    "init_zobrist_table",
    "Board",
    "INITIAL_ATTACKERS",
    "INITIAL_DEFENDERS",
]
