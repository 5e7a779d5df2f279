"""
Type definitions used across layers
"""

from enum import StrEnum


class Player(StrEnum):
    BLUE = "blue"
    RED = "red"

    @property
    def opponent(self) -> "Player":
        return Player.RED if self == Player.BLUE else Player.BLUE


class CellKind(StrEnum):
    GUARD = "guard"
    STACK = "stack"
