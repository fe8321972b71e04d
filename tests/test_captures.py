"""Tests for capture resolution, including the throne and king rules."""

from tablut.core import ATTACKER, DEFENDER, EMPTY, KING, THRONE, parse_move, parse_square


def at(board, name):
    return board.get(parse_square(name))


def test_attackers_sandwich_defender(make_board):
    """Test a defender between two attackers on a file is removed."""
    board = make_board(turn=ATTACKER, attackers=["c2", "a4"], defenders=["c3"], king="g7")

    board.make_move(parse_move("a4-c"))

    assert at(board, "c3") is EMPTY
    assert board.count(ATTACKER) == 2
    assert board.count(DEFENDER) == 0
    assert board.winner is None


def test_defenders_sandwich_attacker(make_board):
    """Test defenders capture along a rank."""
    board = make_board(turn=DEFENDER, attackers=["c6"], defenders=["b6", "d8"], king="g3")

    board.make_move(parse_move("d8-6"))

    assert at(board, "c6") is EMPTY
    assert board.count(ATTACKER) == 0
    assert board.count(DEFENDER) == 2


def test_king_acts_as_capturing_piece(make_board):
    """Test the king forms one jaw of a sandwich."""
    board = make_board(turn=DEFENDER, attackers=["c3"], defenders=["a4"], king="c2")

    board.make_move(parse_move("a4-c"))

    assert at(board, "c3") is EMPTY
    assert board.winner is None


def test_moving_between_enemies_is_safe(make_board):
    """Test a piece may move into a sandwich without being captured."""
    board = make_board(turn=DEFENDER, attackers=["c2", "c4"], defenders=["a3"], king="g7")

    board.make_move(parse_move("a3-c"))

    assert at(board, "c3") is DEFENDER
    assert board.count(ATTACKER) == 2


def test_no_capture_with_gap(make_board):
    """Test pieces three apart do not capture."""
    board = make_board(turn=ATTACKER, attackers=["c1", "a4"], defenders=["c3"], king="g7")

    board.make_move(parse_move("a4-c"))

    assert at(board, "c3") is DEFENDER


def test_multiple_captures_in_one_move(make_board):
    """Test one move can close two sandwiches."""
    board = make_board(
        turn=ATTACKER, attackers=["c2", "e4", "c7"], defenders=["c3", "d4"], king="g7"
    )

    board.make_move(parse_move("c7-4"))

    assert at(board, "c3") is EMPTY
    assert at(board, "d4") is EMPTY
    assert board.count(DEFENDER) == 0


def test_undo_restores_captured_pieces(make_board):
    """Test undo puts captured pieces back."""
    board = make_board(
        turn=ATTACKER, attackers=["c2", "e4", "c7"], defenders=["c3", "d4"], king="g7"
    )
    before = board.encoded_board()

    board.make_move(parse_move("c7-4"))
    board.undo()

    assert board.encoded_board() == before


def test_empty_throne_hostile_to_defenders(make_board):
    """Test a defender between an attacker and the empty throne is captured."""
    board = make_board(turn=ATTACKER, attackers=["a7"], defenders=["e6"], king="g3")

    board.make_move(parse_move("a7-e"))

    assert at(board, "e6") is EMPTY


def test_empty_throne_hostile_to_attackers(make_board):
    """Test an attacker between a defender and the empty throne is captured."""
    board = make_board(turn=DEFENDER, attackers=["d5"], defenders=["c8"], king="g3")

    board.make_move(parse_move("c8-5"))

    assert at(board, "d5") is EMPTY


def test_occupied_throne_not_hostile_to_defender(make_board):
    """Test a defender next to the king's throne survives a single attacker."""
    board = make_board(turn=ATTACKER, attackers=["a7"], defenders=["e6"], king="e5")

    board.make_move(parse_move("a7-e"))

    assert at(board, "e6") is DEFENDER


def test_occupied_throne_hostile_when_king_surrounded(make_board):
    """Test the king's throne captures a defender once attackers hold the other three sides."""
    board = make_board(
        turn=ATTACKER,
        attackers=["a7", "f5", "e4", "d5"],
        defenders=["e6"],
        king="e5",
    )

    board.make_move(parse_move("a7-e"))

    assert at(board, "e6") is EMPTY
    assert board.get(THRONE) is KING
    assert board.winner is None


def test_king_on_throne_needs_four_attackers(make_board):
    """Test the king on the throne with three attacker neighbours survives."""
    board = make_board(turn=ATTACKER, attackers=["f5", "e4", "e8"], king="e5")

    board.make_move(parse_move("e8-6"))

    assert board.get(THRONE) is KING
    assert board.king_position() is THRONE
    assert board.winner is None


def test_king_on_throne_captured_by_four(make_board):
    """Test the fourth attacker captures the king on the throne."""
    board = make_board(turn=ATTACKER, attackers=["f5", "e4", "e6", "a5"], king="e5")

    board.make_move(parse_move("a5-d"))

    assert board.get(THRONE) is EMPTY
    assert board.king_position() is None
    assert board.winner is ATTACKER


def test_king_beside_throne_captured_with_flanks(make_board):
    """Test the king next to the throne falls to three attackers and the empty throne."""
    board = make_board(turn=ATTACKER, attackers=["d6", "f6", "a7"], king="e6")

    board.make_move(parse_move("a7-e"))

    assert at(board, "e6") is EMPTY
    assert board.king_position() is None
    assert board.winner is ATTACKER


def test_king_beside_throne_needs_both_flanks(make_board):
    """Test two attackers plus the throne are not enough beside the throne."""
    board = make_board(turn=ATTACKER, attackers=["f6", "a7"], king="e6")

    board.make_move(parse_move("a7-e"))

    assert at(board, "e6") is KING
    assert board.winner is None


def test_king_beside_throne_not_taken_by_plain_sandwich(make_board):
    """Test a rank sandwich beside the throne does not capture the king."""
    board = make_board(turn=ATTACKER, attackers=["d6", "f9"], king="e6")

    board.make_move(parse_move("f9-6"))

    assert at(board, "e6") is KING
    assert board.winner is None


def test_king_away_from_throne_captured_by_two(make_board):
    """Test the king elsewhere is captured like an ordinary piece."""
    board = make_board(turn=ATTACKER, attackers=["c2", "a4"], king="c3")

    board.make_move(parse_move("a4-c"))

    assert at(board, "c3") is EMPTY
    assert board.winner is ATTACKER


def test_king_capture_undo_keeps_winner(make_board):
    """Test a plain undo leaves the recorded winner in place."""
    board = make_board(turn=ATTACKER, attackers=["c2", "a4"], king="c3")
    before = board.encoded_board()

    board.make_move(parse_move("a4-c"))
    board.undo()

    assert board.encoded_board() == before
    assert board.king_position() is parse_square("c3")
    assert board.winner is ATTACKER
