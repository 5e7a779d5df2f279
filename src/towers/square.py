"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# (columns, rows). Board is always 7x7, but keep the geometry in a single place
BOARD_DIMENSIONS = (7, 7)
BOARD_SIZE = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]


@dataclass(frozen=True)
class Square:
    """
    Zero-indexed column / row. Row 0 is the top of the board.

    Labels: column 0-6 -> 'A'-'G', row 0 -> '7' ... row 6 -> '1'
    """

    col: int
    row: int

    @classmethod
    def from_index(cls, index: int) -> Square:
        return cls(index % BOARD_DIMENSIONS[0], index // BOARD_DIMENSIONS[0])

    @classmethod
    def from_label(cls, label: str) -> Square:
        """'A7' -> (0, 0), 'G1' -> (6, 6)"""
        col = ord(label[0].upper()) - ord("A")
        row = BOARD_DIMENSIONS[1] - int(label[1:])
        return cls(col, row)

    @property
    def index(self) -> int:
        return self.row * BOARD_DIMENSIONS[0] + self.col

    def to_label(self) -> str:
        return f"{chr(ord('A') + self.col)}{BOARD_DIMENSIONS[1] - self.row}"
