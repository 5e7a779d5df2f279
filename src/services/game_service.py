"""Orchestration of communication from the message router to the domain layer and session registry (and the reverse direction)."""

import logging

from src.api.models import (
    NEW_GAME_MARKER,
    UNDO_MARKER,
    CreatedMessage,
    CreateRequest,
    GameStateResponse,
    JoinRequest,
    LegalMovesResponse,
    MoveRequest,
    NewGameConfirm,
    NewGameRequest,
    NewGameRequestMessage,
    PlayerInfo,
    StartMessage,
    UndoConfirm,
    UndoRequest,
    UndoRequestMessage,
    UpdateMessage,
    WinnerMessage,
)
from src.core.exceptions import (
    InvalidRequestError,
    SeatingError,
    SessionNotFoundError,
)
from src.core.models import ConnectionId, Delivery
from src.core.shared_types import Player
from src.db.repository import SessionRepository
from src.towers.rules import legal_targets
from src.towers.session import GameSession

logger = logging.getLogger(__name__)


class GameService:
    """
    Orchestration of layers for a match.

    Every public method either returns the messages to deliver, or raises a GameError without having changed anything.
    Whether (and how) an error reaches a client is up to the router.
    """

    def __init__(self, repository: SessionRepository) -> None:
        self.repo = repository

    # -- Message handling logic ---
    def create_game(self, request: CreateRequest, connection_id: ConnectionId) -> list[Delivery]:
        """First player requested to create a new game. Only the creator hears about it."""
        session = self.repo.create_session(request.name, connection_id)
        created = CreatedMessage(game_id=session.id, color=Player.BLUE)
        return [Delivery((connection_id,), created)]

    def join_game(self, request: JoinRequest, connection_id: ConnectionId) -> list[Delivery]:
        """Second player requested to join a game."""
        session = self.repo.get_session(request.game_id)
        if session is None:
            raise SeatingError("Game full or not found.")

        # SeatingError from a full room propagates with the same message the client expects
        try:
            seat = session.register_player(request.name, connection_id)
        except SeatingError as exc:
            raise SeatingError("Game full or not found.") from exc

        logger.info("%r joined game %s as %s", request.name, session.id, seat.color)
        return [Delivery(session.connection_ids(), self._start_message(session))]

    def make_move(self, request: MoveRequest, connection_id: ConnectionId) -> list[Delivery]:
        """Make a move attempt. Illegal/out of turn moves raise and nothing is broadcast."""
        session = self._fetch_session(request.game_id)

        accepted = session.apply_move(connection_id, request.move_index, request.to_index)
        logger.debug("Game %s: %s", session.id, accepted.to_notation())

        if session.winner is not None:
            logger.info("Game %s won by %s", session.id, session.winner)
            message = WinnerMessage(winner=session.winner, board=session.board.to_wire())
            return [Delivery(session.connection_ids(), message)]

        update = UpdateMessage(
            board=session.board.to_wire(),
            turn=session.turn,
            last_move=accepted.to_notation(),
        )
        return [Delivery(session.connection_ids(), update)]

    def request_undo(self, request: UndoRequest, connection_id: ConnectionId) -> list[Delivery]:
        """Ask the opponent to take back the last move. Forwarded to the other seat only."""
        session = self._fetch_session(request.game_id)
        requester = session.request_undo(connection_id)
        return [Delivery(session.opponent_connection_ids(requester), UndoRequestMessage())]

    def confirm_undo(self, request: UndoConfirm, connection_id: ConnectionId) -> list[Delivery]:
        session = self._fetch_session(request.game_id)
        session.confirm_undo(connection_id)
        update = UpdateMessage(
            board=session.board.to_wire(),
            turn=session.turn,
            last_move=UNDO_MARKER,
        )
        return [Delivery(session.connection_ids(), update)]

    def request_new_game(self, request: NewGameRequest, connection_id: ConnectionId) -> list[Delivery]:
        session = self._fetch_session(request.game_id)
        requester = session.request_new_game(connection_id)
        return [Delivery(session.opponent_connection_ids(requester), NewGameRequestMessage())]

    def confirm_new_game(self, request: NewGameConfirm, connection_id: ConnectionId) -> list[Delivery]:
        session = self._fetch_session(request.game_id)
        session.confirm_new_game(connection_id)
        start = self._start_message(session, last_move=NEW_GAME_MARKER)
        return [Delivery(session.connection_ids(), start)]

    def disconnect(self, connection_id: ConnectionId) -> list[str]:
        """
        A connection closed: free its seats everywhere.
        Sessions nobody is seated at anymore get removed right away. Returns their room codes.
        """
        removed: list[str] = []
        for session in self.repo.sessions():
            if not session.remove_connection(connection_id):
                continue
            if session.is_empty:
                self.repo.remove_session(session.id)
                removed.append(session.id)
        return removed

    # -- Read-only queries ---
    def get_game_state(self, game_id: str) -> GameStateResponse:
        session = self._fetch_session(game_id)
        return GameStateResponse(
            game_id=session.id,
            board=session.board.to_wire(),
            players=self._player_infos(session),
            turn=session.turn,
            move_log=list(session.move_log),
            winner=session.winner,
            pending_undo=session.pending_undo,
            pending_new_game=session.pending_new_game,
        )

    def legal_moves(self, game_id: str, from_index: int) -> LegalMovesResponse:
        """Destinations for the piece on `from_index`, as seen by its owner."""
        session = self._fetch_session(game_id)
        piece = session.board.cells[from_index]
        if piece is None:
            raise InvalidRequestError(f"No piece on square {from_index} in game {game_id}.")
        return LegalMovesResponse(
            game_id=session.id,
            from_index=from_index,
            player=piece.player,
            targets=legal_targets(session.board, from_index, piece.player),
        )

    # -- Internal helpers --
    def _start_message(self, session: GameSession, last_move: str | None = None) -> StartMessage:
        return StartMessage(
            board=session.board.to_wire(),
            players=self._player_infos(session),
            turn=session.turn,
            last_move=last_move,
        )

    def _player_infos(self, session: GameSession) -> list[PlayerInfo]:
        return [PlayerInfo(name=seat.name, color=seat.color) for seat in session.players()]

    def _fetch_session(self, game_id: str) -> GameSession:
        """Attempt to find the session in the repository and raise error if it fails."""
        session = self.repo.get_session(game_id)
        if session is None:
            raise SessionNotFoundError(f"Game with {game_id=} not found.")
        return session
