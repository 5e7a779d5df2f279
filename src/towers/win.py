"""End-of-game check, evaluated on the board right after a move has been applied."""

from typing import Optional

from src.core.shared_types import Player
from src.towers.board import HOME_SQUARES, Board


def detect_winner(board: Board, mover: Player) -> Optional[Player]:
    """
    Winner after `mover` made a move, or None if the game continues.
    ---

    1. the opponent's guard is gone --> mover wins (checked first, so it decides the winner on its own)
    2. the mover's guard stands on the opponent's home square --> mover wins

    NOTE Both guards missing cannot happen in legal play. It is reported as a blue win, as it always has been.
    """
    opponent = mover.opponent
    if board.locate_guard(Player.BLUE) is None and board.locate_guard(Player.RED) is None:
        return Player.BLUE

    if board.locate_guard(opponent) is None:
        return mover

    if board.locate_guard(mover) == HOME_SQUARES[opponent]:
        return mover

    return None
