"""Unit tests for /src/towers/rules.py"""

from copy import deepcopy

import pytest

from src.core.shared_types import Player
from src.towers.board import Board
from src.towers.pieces import Guard, Stack
from src.towers.rules import AcceptedMove, Move, legal_targets, validate
from src.towers.square import Square

BLUE = Player.BLUE
RED = Player.RED

# D4, the middle of the board
CENTER = 24


def idx(label: str) -> int:
    return Square.from_label(label).index


# -- SOURCE SQUARE ---
def test_empty_source_is_rejected(board_with) -> None:
    board = board_with({})
    assert not validate(board, CENTER, CENTER + 1, BLUE).valid


def test_cannot_move_opponent_piece(board_with) -> None:
    board = board_with({CENTER: Stack(2, RED)})
    assert not validate(board, CENTER, CENTER + 1, BLUE).valid


@pytest.mark.parametrize("from_index, to_index", [(-1, 0), (0, 49), (CENTER, CENTER)])
def test_off_board_or_null_move_is_rejected(board_with, from_index: int, to_index: int) -> None:
    board = board_with({0: Stack(3, BLUE), CENTER: Stack(3, BLUE)})
    assert not validate(board, from_index, to_index, BLUE).valid


# -- GUARD MOVES ---
@pytest.mark.parametrize("target", ["D5", "D3", "C4", "E4"])
def test_guard_single_orthogonal_step(board_with, target: str) -> None:
    board = board_with({CENTER: Guard(BLUE)})
    outcome = validate(board, CENTER, idx(target), BLUE)

    assert outcome.valid
    assert outcome.amount == 1
    assert outcome.next_board is not None
    assert outcome.next_board.cell(Square.from_label(target)) == Guard(BLUE)
    assert outcome.next_board.cells[CENTER] is None


@pytest.mark.parametrize("target", ["C5", "E3", "D6", "F4", "D2"])
def test_guard_no_diagonals_or_slides(board_with, target: str) -> None:
    board = board_with({CENTER: Guard(BLUE)})
    assert not validate(board, CENTER, idx(target), BLUE).valid


def test_guard_does_not_wrap_around_rows(board_with) -> None:
    """G7 (index 6) and A6 (index 7) are neighbours in index space only."""
    board = board_with({6: Guard(RED)})
    assert not validate(board, 6, 7, RED).valid


def test_guard_cannot_land_on_own_piece(board_with) -> None:
    board = board_with({CENTER: Guard(BLUE), idx("D5"): Stack(1, BLUE)})
    assert not validate(board, CENTER, idx("D5"), BLUE).valid


def test_guard_captures_stack_of_any_size(board_with) -> None:
    board = board_with({CENTER: Guard(BLUE), idx("D5"): Stack(7, RED)})
    outcome = validate(board, CENTER, idx("D5"), BLUE)

    assert outcome.valid
    assert outcome.amount == 1
    assert outcome.next_board.cell(Square.from_label("D5")) == Guard(BLUE)
    assert outcome.next_board.count_tokens()[RED] == 0


def test_guard_captures_guard(board_with) -> None:
    board = board_with({CENTER: Guard(BLUE), idx("E4"): Guard(RED)})
    outcome = validate(board, CENTER, idx("E4"), BLUE)

    assert outcome.valid
    assert outcome.next_board.locate_guard(RED) is None


# -- STACK MOVES ---
def test_single_stack_slides_one_square(board_with) -> None:
    board = board_with({idx("D3"): Stack(1, BLUE)})
    outcome = validate(board, idx("D3"), idx("D4"), BLUE)

    assert outcome.valid
    assert outcome.amount == 1
    assert outcome.next_board.cell(Square.from_label("D4")) == Stack(1, BLUE)
    assert outcome.next_board.cell(Square.from_label("D3")) is None


def test_stack_cannot_slide_further_than_its_count(board_with) -> None:
    board = board_with({idx("D3"): Stack(1, BLUE)})
    assert not validate(board, idx("D3"), idx("D5"), BLUE).valid


def test_stack_cannot_move_diagonally(board_with) -> None:
    board = board_with({CENTER: Stack(3, BLUE)})
    assert not validate(board, CENTER, idx("E5"), BLUE).valid


def test_partial_stack_move_splits_the_stack(board_with) -> None:
    """Amount is the distance travelled. The rest stays behind."""
    board = board_with({CENTER: Stack(3, RED)})
    outcome = validate(board, CENTER, idx("F4"), RED)

    assert outcome.valid
    assert outcome.amount == 2
    assert outcome.next_board.cell(Square.from_label("F4")) == Stack(2, RED)
    assert outcome.next_board.cells[CENTER] == Stack(1, RED)


@pytest.mark.parametrize("blocker", [Stack(1, BLUE), Stack(1, RED), Guard(BLUE), Guard(RED)])
def test_any_piece_in_between_blocks(board_with, blocker) -> None:
    board = board_with({idx("D1"): Stack(3, BLUE), idx("D2"): blocker})
    assert not validate(board, idx("D1"), idx("D3"), BLUE).valid
    assert not validate(board, idx("D1"), idx("D4"), BLUE).valid


def test_merge_with_own_stack(board_with) -> None:
    board = board_with({idx("A1"): Stack(2, BLUE), idx("A3"): Stack(4, BLUE)})
    outcome = validate(board, idx("A1"), idx("A3"), BLUE)

    assert outcome.valid
    assert outcome.amount == 2
    assert outcome.next_board.cell(Square.from_label("A3")) == Stack(6, BLUE)
    assert outcome.next_board.cell(Square.from_label("A1")) is None


def test_stack_cannot_land_on_own_guard(board_with) -> None:
    board = board_with({idx("A1"): Stack(2, BLUE), idx("B1"): Guard(BLUE)})
    assert not validate(board, idx("A1"), idx("B1"), BLUE).valid


def test_capture_stack_of_equal_count(board_with) -> None:
    board = board_with({idx("A1"): Stack(2, BLUE), idx("A3"): Stack(2, RED)})
    outcome = validate(board, idx("A1"), idx("A3"), BLUE)

    assert outcome.valid
    assert outcome.next_board.cell(Square.from_label("A3")) == Stack(2, BLUE)


def test_capture_compares_moving_amount_not_stack_size(board_with) -> None:
    """A stack of 5 moving a single square only carries 1 token: not enough to take a stack of 2."""
    board = board_with({CENTER: Stack(5, BLUE), idx("D5"): Stack(2, RED)})
    assert not validate(board, CENTER, idx("D5"), BLUE).valid


def test_capture_of_larger_stack_is_illegal(board_with) -> None:
    board = board_with({idx("A1"): Stack(2, BLUE), idx("A3"): Stack(3, RED)})
    assert not validate(board, idx("A1"), idx("A3"), BLUE).valid


def test_stack_captures_guard_with_any_amount(board_with) -> None:
    board = board_with({CENTER: Stack(4, RED), idx("D3"): Guard(BLUE)})
    outcome = validate(board, CENTER, idx("D3"), RED)

    assert outcome.valid
    assert outcome.amount == 1
    assert outcome.next_board.cell(Square.from_label("D3")) == Stack(1, RED)
    assert outcome.next_board.cells[CENTER] == Stack(3, RED)
    assert outcome.next_board.locate_guard(BLUE) is None


def test_long_capture_through_empty_squares(board_with) -> None:
    """Stack of 3 slides 3 squares onto an opposing stack of 2: all of it lands, source empties."""
    board = board_with({idx("A1"): Stack(3, BLUE), idx("A4"): Stack(2, RED)})
    outcome = validate(board, idx("A1"), idx("A4"), BLUE)

    assert outcome.valid
    assert outcome.amount == 3
    assert outcome.next_board.cell(Square.from_label("A4")) == Stack(3, BLUE)
    assert outcome.next_board.cell(Square.from_label("A1")) is None
    # captured tokens vanish, they never change sides
    assert outcome.next_board.count_tokens() == {BLUE: 3, RED: 0}


@pytest.mark.parametrize(
    "from_label, to_label",
    [("D4", "D5"), ("D4", "D7"), ("D4", "A4"), ("D4", "F4"), ("D4", "D2")],
)
def test_mover_tokens_are_conserved_without_capture(board_with, from_label: str, to_label: str) -> None:
    board = board_with({CENTER: Stack(3, BLUE), idx("D2"): Stack(2, BLUE)})
    outcome = validate(board, idx(from_label), idx(to_label), BLUE)

    assert outcome.valid
    assert outcome.next_board.count_tokens()[BLUE] == 5


def test_validate_never_mutates_input() -> None:
    board = Board.starting_layout()
    before = deepcopy(board)
    outcome = validate(board, idx("D3"), idx("D4"), BLUE)

    assert outcome.valid
    assert board == before
    assert outcome.next_board != board


# -- NOTATION ---
def test_move_notation() -> None:
    accepted = AcceptedMove(Move.from_indices(idx("D3"), idx("D4")), 1)
    assert accepted.to_notation() == "D3-D4-1"


def test_path_between_squares() -> None:
    move = Move.from_indices(idx("A1"), idx("A5"))
    assert [square.to_label() for square in move.path()] == ["A2", "A3", "A4"]


# -- LEGAL TARGETS ---
def test_legal_targets_of_lone_stack(board_with) -> None:
    board = board_with({CENTER: Stack(2, BLUE)})
    assert legal_targets(board, CENTER, BLUE) == [10, 17, 22, 23, 25, 26, 31, 38]


def test_legal_targets_of_lone_guard(board_with) -> None:
    board = board_with({CENTER: Guard(RED)})
    assert legal_targets(board, CENTER, RED) == [17, 23, 25, 31]


def test_no_legal_targets_for_opponent_piece(board_with) -> None:
    board = board_with({CENTER: Guard(RED)})
    assert legal_targets(board, CENTER, BLUE) == []
