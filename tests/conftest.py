"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Iterator

import pytest

from src.core.shared_types import Player
from src.db.memory_repository import InMemorySessionRepository
from src.services.game_service import GameService
from src.towers.board import Board
from src.towers.pieces import Cell, Guard
from src.towers.session import GameSession

BLUE_CONNECTION = "conn-blue"
RED_CONNECTION = "conn-red"
ROOM_CODE = "ROOM01"

BoardBuilder = Callable[[dict[int, Cell]], Board]


@pytest.fixture
def board_with() -> BoardBuilder:
    """Call the inner function with {index: cell} to get an otherwise empty board"""

    def _create_board(cells: dict[int, Cell]) -> Board:
        board = Board.empty()
        for index, cell in cells.items():
            board.cells[index] = cell
        return board

    return _create_board


@pytest.fixture
def guards_only(board_with: BoardBuilder) -> Board:
    """Both guards on their home squares (D1 for blue, D7 for red), nothing else."""
    return board_with({45: Guard(Player.BLUE), 3: Guard(Player.RED)})


@pytest.fixture
def seated_session() -> GameSession:
    """A session in the starting position with both seats taken."""
    session = GameSession.new_session(ROOM_CODE, "Bluey", BLUE_CONNECTION)
    session.register_player("Redd", RED_CONNECTION)
    return session


@pytest.fixture
def repository() -> Iterator[InMemorySessionRepository]:
    """Ensures to clear the repository between tests. Room codes are handed out as ROOM01, ROOM02, ..."""
    counter = iter(range(1, 1000))
    repo = InMemorySessionRepository(code_factory=lambda: f"ROOM{next(counter):02d}")
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(repository: InMemorySessionRepository) -> GameService:
    return GameService(repository)
