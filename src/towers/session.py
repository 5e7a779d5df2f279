"""
The GameSession is the entrypoint into the domain layer for the service layer.
It holds the mutable state of one match and sequences the rules engine and the win check for every committed move.

Every operation either succeeds completely or raises a GameError before touching any state.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import (
    GameOverError,
    IllegalMoveError,
    NoPendingRequestError,
    NotSeatedError,
    NothingToUndoError,
    NotYourTurnError,
    SeatingError,
)
from src.core.shared_types import Player
from src.towers.board import Board
from src.towers.rules import AcceptedMove, Move, validate
from src.towers.win import detect_winner

# Seat colors in the order they are handed out
SEAT_ORDER: tuple[Player, ...] = (Player.BLUE, Player.RED)


@dataclass(frozen=True)
class Seat:
    name: str
    color: Player
    connection_id: str


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot taken right before a committed move. Turn is kept so undoing a winning move restores it too."""

    board: Board
    turn: Player


@dataclass
class GameSession:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    id: str
    board: Board
    seats: dict[Player, Seat]
    turn: Player = Player.BLUE
    move_log: list[str] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)
    winner: Optional[Player] = None
    # color of the seat waiting for the opponent to confirm
    pending_undo: Optional[Player] = None
    pending_new_game: Optional[Player] = None

    @classmethod
    def new_session(cls, game_id: str, player: str, connection_id: str) -> Self:
        """The creator always plays blue."""
        return cls(
            id=game_id,
            board=Board.starting_layout(),
            seats={Player.BLUE: Seat(player, Player.BLUE, connection_id)},
        )

    # --- SEATS ---
    @property
    def is_full(self) -> bool:
        return len(self.seats) == len(SEAT_ORDER)

    @property
    def is_empty(self) -> bool:
        return not self.seats

    def register_player(self, player: str, connection_id: str) -> Seat:
        """Second player takes whichever seat is free (red, unless the blue player already left)."""
        if self.seat_color(connection_id) is not None:
            raise SeatingError(f"Connection already seated in game {self.id}.")
        free_colors = [color for color in SEAT_ORDER if color not in self.seats]
        if not free_colors:
            raise SeatingError(f"Game {self.id} is full.")
        seat = Seat(player, free_colors[0], connection_id)
        self.seats[seat.color] = seat
        return seat

    def remove_connection(self, connection_id: str) -> list[Player]:
        """Free every seat held by this connection. Returns the colors that were freed."""
        freed = [
            color
            for color, seat in self.seats.items()
            if seat.connection_id == connection_id
        ]
        for color in freed:
            del self.seats[color]
        return freed

    def seat_color(self, connection_id: str) -> Optional[Player]:
        return next(
            (
                color
                for color, seat in self.seats.items()
                if seat.connection_id == connection_id
            ),
            None,
        )

    def players(self) -> list[Seat]:
        return [self.seats[color] for color in SEAT_ORDER if color in self.seats]

    def connection_ids(self) -> tuple[str, ...]:
        return tuple(seat.connection_id for seat in self.players())

    def opponent_connection_ids(self, color: Player) -> tuple[str, ...]:
        opponent = self.seats.get(color.opponent)
        return (opponent.connection_id,) if opponent else ()

    # --- MOVES ---
    def apply_move(self, connection_id: str, from_index: int, to_index: int) -> AcceptedMove:
        """
        Attempt to make a move
        -----

        1. game must still be running
        2. the connection must hold a seat, and it must be that seat's turn
        3. the rules engine must accept the move
        4. snapshot, apply, log, check for a winner
        5. no winner? the opponent is to move
        """
        if self.winner is not None:
            raise GameOverError(f"Game {self.id} already won by {self.winner}.")

        mover = self._assert_seated(connection_id)
        if mover != self.turn:
            raise NotYourTurnError(f"It is not your turn. Waiting for {self.turn}.")

        outcome = validate(self.board, from_index, to_index, mover)
        if not outcome.valid or outcome.next_board is None:
            raise IllegalMoveError(f"Move not allowed: {from_index} -> {to_index}")

        accepted = AcceptedMove(Move.from_indices(from_index, to_index), outcome.amount)

        self.history.append(HistoryEntry(self.board.copy(), self.turn))
        self.board = outcome.next_board
        self.move_log.append(accepted.to_notation())

        winner = detect_winner(self.board, mover)
        if winner is not None:
            self.winner = winner
        else:
            self.turn = mover.opponent
        return accepted

    @property
    def last_move(self) -> Optional[str]:
        return self.move_log[-1] if self.move_log else None

    # --- TWO-PHASE HANDSHAKES ---
    def request_undo(self, connection_id: str) -> Player:
        """Remember who asked. Nothing to take back? Then there is nothing to ask either."""
        requester = self._assert_seated(connection_id)
        if not self.history:
            raise NothingToUndoError(f"Game {self.id} has no moves to undo.")
        self.pending_undo = requester
        return requester

    def confirm_undo(self, connection_id: str) -> None:
        """Only the opponent of the requesting seat can confirm. Takes back exactly one move."""
        confirmer = self._assert_seated(connection_id)
        if self.pending_undo is None or self.pending_undo == confirmer:
            raise NoPendingRequestError("No undo request from the opponent to confirm.")
        if not self.history:
            raise NothingToUndoError(f"Game {self.id} has no moves to undo.")

        entry = self.history.pop()
        self.board = entry.board
        self.turn = entry.turn
        self.move_log.pop()
        self.winner = None
        self.pending_undo = None

    def request_new_game(self, connection_id: str) -> Player:
        requester = self._assert_seated(connection_id)
        self.pending_new_game = requester
        return requester

    def confirm_new_game(self, connection_id: str) -> None:
        confirmer = self._assert_seated(connection_id)
        if self.pending_new_game is None or self.pending_new_game == confirmer:
            raise NoPendingRequestError("No new game request from the opponent to confirm.")
        self.reset()

    def reset(self) -> None:
        """Back to the opening position. Seats are kept."""
        self.board = Board.starting_layout()
        self.turn = Player.BLUE
        self.move_log = []
        self.history = []
        self.winner = None
        self.pending_undo = None
        self.pending_new_game = None

    # -- PRIVATE HELPERS ---
    def _assert_seated(self, connection_id: str) -> Player:
        color = self.seat_color(connection_id)
        if color is None:
            raise NotSeatedError(f"Connection is not seated in game {self.id}.")
        return color
