"""Tests for minimax and alpha-beta search."""

import random

import pytest
from tablut.core import ATTACKER, DEFENDER, SQUARE_LIST, THRONE, Board, parse_move, parse_square
from tablut.solver import (
    DEFAULT_DEPTH_SCHEDULE,
    WIN_VALUE,
    AlphaBetaSearcher,
    MinimaxSearcher,
    SearchConfig,
)


def random_small_position(make_board, rng, attackers=3, defenders=2):
    """A seeded position with a few pieces and the king off the edge."""
    interior = [s for s in SQUARE_LIST if not s.is_edge and s is not THRONE]
    king = rng.choice(interior)
    others = [s for s in SQUARE_LIST if s is not king and s is not THRONE]
    chosen = rng.sample(others, attackers + defenders)
    return make_board(
        turn=rng.choice([ATTACKER, DEFENDER]),
        attackers=[str(s) for s in chosen[:attackers]],
        defenders=[str(s) for s in chosen[attackers:]],
        king=str(king),
    )


def test_default_depth_for_opening():
    """Test the opening position gets the shallowest depth."""
    assert SearchConfig().depth_for(Board()) == DEFAULT_DEPTH_SCHEDULE[0][1]


def test_depth_never_shrinks_with_fewer_pieces(make_board):
    """Test depth is monotone in the number of pieces left."""
    config = SearchConfig()
    files = "abcdefghi"
    squares = [f"{f}{r}" for r in (1, 2, 8, 9) for f in files]

    depths = []
    for n in range(24, -1, -1):
        board = make_board(attackers=squares[:n], king="e5")
        depths.append(config.depth_for(board))

    assert depths == sorted(depths)
    assert depths[-1] == DEFAULT_DEPTH_SCHEDULE[-1][1]


def test_fixed_depth_overrides_schedule():
    """Test an explicit depth wins over the schedule."""
    assert SearchConfig(fixed_depth=4).depth_for(Board()) == 4


@pytest.mark.parametrize(
    "kwargs",
    [
        {"fixed_depth": 0},
        {"depth_schedule": ()},
        {"depth_schedule": ((10, 2), (20, 3), (0, 4))},  # Not descending
        {"depth_schedule": ((20, 3), (10, 2), (0, 4))},  # Gets shallower
        {"depth_schedule": ((20, 2), (10, 3))},  # No 0-piece entry
        {"depth_schedule": ((20, 0), (0, 1))},
    ],
)
def test_invalid_config(kwargs):
    """Test bad search settings are rejected."""
    with pytest.raises(ValueError):
        SearchConfig(**kwargs)


def test_search_does_not_mutate_board():
    """Test the caller's board is untouched by a search."""
    board = Board()
    board.make_move(parse_move("d1-4"))
    before = board.encoded_board()
    history = board.history()

    move = AlphaBetaSearcher(DEFENDER, SearchConfig(fixed_depth=2)).find_move(board)

    assert move is not None
    assert board.is_legal(move)
    assert board.encoded_board() == before
    assert board.history() == history
    assert board.move_count == 1


def test_search_rejects_zero_depth():
    """Test a root search needs at least one ply."""
    with pytest.raises(ValueError):
        AlphaBetaSearcher(ATTACKER).search(Board(), depth=0)


def test_king_takes_escape(make_board):
    """Test the defenders play an escaping king move."""
    board = make_board(turn=DEFENDER, attackers=["g7"], defenders=["h2"], king="c3")

    result = AlphaBetaSearcher(DEFENDER).search(board, depth=1)

    assert result.value == WIN_VALUE
    assert result.move.from_sq is parse_square("c3")
    assert result.move.to_sq.is_edge


def test_attackers_capture_king(make_board):
    """Test the attackers close the sandwich on the king."""
    board = make_board(turn=ATTACKER, attackers=["c2", "a4"], king="c3")

    result = AlphaBetaSearcher(ATTACKER).search(board, depth=1)

    assert result.value == -WIN_VALUE
    assert result.move == parse_move("a4-c")


def test_no_legal_move_returns_none(make_board):
    """Test a stuck side gets no move and a lost score."""
    board = make_board(turn=ATTACKER, attackers=["a1"], defenders=["a2", "b1"], king="g7")

    result = AlphaBetaSearcher(ATTACKER).search(board, depth=2)

    assert result.move is None
    assert result.value == WIN_VALUE
    assert AlphaBetaSearcher(ATTACKER).find_move(board) is None


def test_finished_game_returns_terminal_value(make_board):
    """Test searching a decided position returns immediately."""
    board = make_board(turn=DEFENDER, attackers=["g7"], king="c3")
    board.make_move(parse_move("c3-a"))

    result = AlphaBetaSearcher(ATTACKER).search(board, depth=3)

    assert result.move is None
    assert result.value == WIN_VALUE
    assert result.nodes == 1


def test_search_sees_move_limit():
    """Test a position at the move limit is lost for the side to move."""
    board = Board()
    board.set_move_limit(1)
    board.make_move(parse_move("d1-4"))
    board.make_move(parse_move("c5-7"))

    result = AlphaBetaSearcher(ATTACKER).search(board, depth=2)

    assert result.value == WIN_VALUE
    assert board.winner is None


def test_alphabeta_matches_minimax(make_board):
    """Test pruning never changes the root value or move."""
    rng = random.Random(1234)
    for _ in range(6):
        board = random_small_position(make_board, rng)
        side = board.turn

        full = MinimaxSearcher(side).search(board, depth=2)
        pruned = AlphaBetaSearcher(side).search(board, depth=2)

        assert pruned.value == full.value
        assert pruned.move == full.move
        assert pruned.nodes <= full.nodes


def test_alphabeta_matches_minimax_depth_three(make_board):
    """Test the differential property one ply deeper on a sparse board."""
    rng = random.Random(99)
    board = random_small_position(make_board, rng, attackers=2, defenders=0)
    side = board.turn

    full = MinimaxSearcher(side).search(board, depth=3)
    pruned = AlphaBetaSearcher(side).search(board, depth=3)

    assert pruned.value == full.value
    assert pruned.move == full.move
    assert pruned.nodes <= full.nodes


def test_first_of_equal_moves_is_kept(make_board):
    """Test ties go to the earliest enumerated move."""
    # The boxed-in king has two moves, both to the edge
    board = make_board(turn=DEFENDER, attackers=["i9"], defenders=["b3", "c2"], king="b2")

    result = MinimaxSearcher(DEFENDER).search(board, depth=1)

    assert result.value == WIN_VALUE
    assert result.move == parse_move("b2-1")
    assert result.move == board.legal_moves(DEFENDER)[0]
    assert AlphaBetaSearcher(DEFENDER).search(board, depth=1).move == result.move
