"""
Movement and capturing rules.

`validate` is the single source of truth for legality: it never touches the board it is given
and returns the board as it would look after the move.
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.core.shared_types import Player
from src.towers.board import Board
from src.towers.pieces import Cell, Guard, Stack, with_count
from src.towers.square import BOARD_SIZE, Square


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_indices(cls, from_index: int, to_index: int) -> Self:
        return cls(Square.from_index(from_index), Square.from_index(to_index))

    @property
    def is_straight(self) -> bool:
        return (
            self.from_square.col == self.to_square.col
            or self.from_square.row == self.to_square.row
        )

    @property
    def manhattan_distance(self) -> int:
        return abs(self.to_square.col - self.from_square.col) + abs(
            self.to_square.row - self.from_square.row
        )

    def path(self) -> list[Square]:
        """Squares strictly between source and destination of a straight move."""
        d_col = _sign(self.to_square.col - self.from_square.col)
        d_row = _sign(self.to_square.row - self.from_square.row)
        return [
            Square(self.from_square.col + d_col * step, self.from_square.row + d_row * step)
            for step in range(1, self.manhattan_distance)
        ]


@dataclass(frozen=True)
class AcceptedMove:
    """A move that passed validation, together with the number of tokens it carried."""

    move: Move
    amount: int

    def to_notation(self) -> str:
        """
        '<from>-<to>-<amount>', ex) 'D3-D4-1'

        Guard moves always carry an amount of 1.
        """
        return f"{self.move.from_square.to_label()}-{self.move.to_square.to_label()}-{self.amount}"


@dataclass(frozen=True)
class MoveOutcome:
    valid: bool
    amount: int = 0
    next_board: Optional[Board] = None


REJECTED = MoveOutcome(valid=False)


def validate(board: Board, from_index: int, to_index: int, mover: Player) -> MoveOutcome:
    """
    Decide if `mover` may move the piece on `from_index` to `to_index`
    ---

    1. the source must hold one of the mover's pieces
    2. guard: single orthogonal step onto an empty square or any opposing piece
    3. stack: straight slide over empty squares, at most `count` squares far
    """
    if not (_on_board(from_index) and _on_board(to_index)) or from_index == to_index:
        return REJECTED

    move = Move.from_indices(from_index, to_index)
    piece = board.cell(move.from_square)
    if piece is None or piece.player != mover:
        return REJECTED

    if isinstance(piece, Guard):
        return _validate_guard_move(board, move, piece)
    return _validate_stack_move(board, move, piece)


def legal_targets(board: Board, from_index: int, mover: Player) -> list[int]:
    """All destinations `validate` accepts for the piece on `from_index`."""
    return [
        to_index
        for to_index in range(BOARD_SIZE)
        if validate(board, from_index, to_index, mover).valid
    ]


# --- MOVEMENT RULES ---
def _validate_guard_move(board: Board, move: Move, guard: Guard) -> MoveOutcome:
    if move.manhattan_distance != 1:
        return REJECTED

    target = board.cell(move.to_square)
    # a guard captures any opposing piece, regardless of the size of a stack
    if target is not None and target.player == guard.player:
        return REJECTED

    next_board = board.copy()
    next_board.clear(move.from_square)
    next_board.place(move.to_square, guard)
    return MoveOutcome(valid=True, amount=1, next_board=next_board)


def _validate_stack_move(board: Board, move: Move, stack: Stack) -> MoveOutcome:
    if not move.is_straight:
        return REJECTED

    # the number of tokens moved is exactly the number of squares travelled
    amount = move.manhattan_distance
    if amount > stack.count:
        return REJECTED

    # no jumping: friendly or hostile pieces both block
    if any(not board.is_empty(square) for square in move.path()):
        return REJECTED

    landing = _resolve_landing(board.cell(move.to_square), stack.player, amount)
    if landing is None:
        return REJECTED

    next_board = board.copy()
    next_board.place(move.from_square, with_count(stack, stack.count - amount))
    next_board.place(move.to_square, landing)
    return MoveOutcome(valid=True, amount=amount, next_board=next_board)


def _resolve_landing(target: Cell, player: Player, amount: int) -> Optional[Stack]:
    """
    What ends up on the destination square, or None if the stack cannot land there.
    ---

    * empty --> the moving tokens
    * own stack --> merge
    * own guard --> blocked
    * opposing guard --> captured, whatever the amount
    * opposing stack --> captured entirely if it is not larger than the moving amount
    """
    if target is None:
        return Stack(amount, player)

    if target.player == player:
        if isinstance(target, Stack):
            return Stack(amount + target.count, player)
        return None

    if isinstance(target, Guard) or target.count <= amount:
        return Stack(amount, player)
    return None


def _on_board(index: int) -> bool:
    return 0 <= index < BOARD_SIZE


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)
