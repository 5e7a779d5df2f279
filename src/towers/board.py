"""The Game board: a fixed sequence of 49 cells, index = row * 7 + col"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Player
from src.towers.pieces import (
    Cell,
    Guard,
    Stack,
    WireCell,
    cell_from_wire,
    cell_to_wire,
)
from src.towers.square import BOARD_SIZE, Square

# (col, row) of the opening stacks. Red occupies the top of the board, blue mirrors it at the bottom.
RED_STACKS: tuple[tuple[int, int], ...] = (
    (0, 0),
    (1, 0),
    (2, 1),
    (3, 2),
    (4, 1),
    (5, 0),
    (6, 0),
)
BLUE_STACKS: tuple[tuple[int, int], ...] = tuple((col, 6 - row) for col, row in RED_STACKS)

# Each guard's starting square. The opponent's guard reaching it wins the game.
HOME_SQUARES: dict[Player, Square] = {
    Player.RED: Square.from_label("D7"),
    Player.BLUE: Square.from_label("D1"),
}


@dataclass
class Board:
    cells: list[Cell]

    def __post_init__(self):
        if len(self.cells) != BOARD_SIZE:
            raise InvalidRequestError(
                f"Board must have exactly {BOARD_SIZE} cells, got {len(self.cells)}"
            )

    @classmethod
    def empty(cls) -> Self:
        return cls([None] * BOARD_SIZE)

    @classmethod
    def starting_layout(cls) -> Self:
        """Seven single-token stacks and one guard per player."""
        board = cls.empty()
        for col, row in RED_STACKS:
            board.place(Square(col, row), Stack(1, Player.RED))
        for col, row in BLUE_STACKS:
            board.place(Square(col, row), Stack(1, Player.BLUE))
        for player, home in HOME_SQUARES.items():
            board.place(home, Guard(player))
        return board

    @classmethod
    def from_wire(cls, entries: list[WireCell]) -> Self:
        """Inverse of `to_wire`. Raises InvalidRequestError on anything that is not a valid board."""
        return cls([cell_from_wire(entry) for entry in entries])

    def to_wire(self) -> list[WireCell]:
        return [cell_to_wire(cell) for cell in self.cells]

    def cell(self, square: Square) -> Cell:
        return self.cells[square.index]

    def place(self, square: Square, cell: Cell) -> None:
        self.cells[square.index] = cell

    def clear(self, square: Square) -> None:
        self.cells[square.index] = None

    def is_empty(self, square: Square) -> bool:
        return self.cell(square) is None

    def copy(self) -> Self:
        return deepcopy(self)

    def locate_guard(self, player: Player) -> Optional[Square]:
        """Square of the player's guard, or None if it has been captured."""
        for index, cell in enumerate(self.cells):
            if isinstance(cell, Guard) and cell.player == player:
                return Square.from_index(index)
        return None

    def count_guards(self, player: Player) -> int:
        return sum(
            1
            for cell in self.cells
            if isinstance(cell, Guard) and cell.player == player
        )

    def count_tokens(self) -> dict[Player, int]:
        """Tally the stack tokens each player has on the board"""
        return {player: self._count_tokens_player(player) for player in Player}

    def _count_tokens_player(self, player: Player) -> int:
        return sum(
            cell.count
            for cell in self.cells
            if isinstance(cell, Stack) and cell.player == player
        )
