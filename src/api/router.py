"""
MessageRouter: the WebSocket boundary.

Decodes inbound frames, resolves the session lock, calls the GameService and delivers whatever it returns.
This is the only place where GameErrors get translated into what a client sees:

* SeatingError --> direct `error` reply
* any other GameError --> silently dropped (logged)
* malformed payload --> dropped, connection stays open
"""

import logging
from typing import Callable
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect

from src.api.models import (
    CreateRequest,
    ErrorMessage,
    GameStateResponse,
    InboundMessage,
    JoinRequest,
    LegalMovesResponse,
    MoveRequest,
    NewGameConfirm,
    NewGameRequest,
    UndoConfirm,
    UndoRequest,
    parse_inbound,
)
from src.core.exceptions import (
    GameError,
    InvalidRequestError,
    SeatingError,
    SessionNotFoundError,
)
from src.core.models import ConnectionId, Delivery
from src.db.repository import SessionRepository
from src.services.game_service import GameService
from src.towers.square import BOARD_SIZE

logger = logging.getLogger(__name__)

Handler = Callable[[InboundMessage, ConnectionId], list[Delivery]]


class MessageRouter:
    """Keeps track of open sockets and routes their messages to the service."""

    def __init__(self, service: GameService, repository: SessionRepository) -> None:
        self.service = service
        self.repo = repository
        self.connections: dict[ConnectionId, WebSocket] = {}
        self._handlers: dict[type, Handler] = {
            CreateRequest: service.create_game,
            JoinRequest: service.join_game,
            MoveRequest: service.make_move,
            UndoRequest: service.request_undo,
            UndoConfirm: service.confirm_undo,
            NewGameRequest: service.request_new_game,
            NewGameConfirm: service.confirm_new_game,
        }

    async def connect(self, websocket: WebSocket) -> ConnectionId:
        await websocket.accept()
        connection_id = uuid4().hex
        self.connections[connection_id] = websocket
        logger.debug("Connection %s opened", connection_id)
        return connection_id

    def disconnect(self, connection_id: ConnectionId) -> None:
        self.connections.pop(connection_id, None)
        removed = self.service.disconnect(connection_id)
        logger.debug("Connection %s closed, removed games: %s", connection_id, removed)

    async def handle(self, connection_id: ConnectionId, raw: str | bytes) -> None:
        """Handle one frame (text or bytes) to completion: validate, apply, deliver."""
        logger.debug("[RECEIVED] %s: %s", connection_id, raw)
        try:
            message = parse_inbound(raw)
        except InvalidRequestError as exc:
            logger.warning("Dropping malformed message from %s: %s", connection_id, exc)
            return

        if isinstance(message, CreateRequest):
            await self._run(message, connection_id)
            return

        # one request per session at a time, for the whole validate/apply/broadcast cycle
        async with self.repo.lock(message.game_id):
            await self._run(message, connection_id)

    async def deliver(self, deliveries: list[Delivery]) -> None:
        """Fire and forget: a dead socket is logged, never reported back to the session."""
        for delivery in deliveries:
            payload = delivery.message.model_dump(mode="json", by_alias=True, exclude_none=True)
            logger.debug("[BROADCASTING] %s -> %s", payload.get("type"), delivery.recipients)
            for connection_id in delivery.recipients:
                websocket = self.connections.get(connection_id)
                if websocket is None:
                    continue
                try:
                    await websocket.send_json(payload)
                except Exception as exc:
                    logger.warning("Could not deliver to %s: %s", connection_id, exc)

    async def _run(self, message: InboundMessage, connection_id: ConnectionId) -> None:
        handler = self._handlers[type(message)]
        try:
            deliveries = handler(message, connection_id)
        except SeatingError as exc:
            deliveries = [Delivery((connection_id,), ErrorMessage(message=str(exc)))]
        except GameError as exc:
            logger.debug("Ignoring %s from %s: %s", message.type, connection_id, exc)
            return
        await self.deliver(deliveries)


def create_router(message_router: MessageRouter) -> APIRouter:
    """WebSocket endpoint plus a couple of read-only HTTP routes."""
    router = APIRouter()

    @router.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        connection_id = await message_router.connect(websocket)
        try:
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    break
                raw = frame.get("text") or frame.get("bytes")
                if raw is None:
                    logger.warning("Dropping empty frame from %s", connection_id)
                    continue
                await message_router.handle(connection_id, raw)
        except WebSocketDisconnect:
            pass
        finally:
            message_router.disconnect(connection_id)

    @router.get("/health")
    def health() -> dict[str, int | str]:
        return {"status": "ok", "games": len(list(message_router.repo.sessions()))}

    @router.get("/games/{game_id}", response_model=GameStateResponse, response_model_by_alias=True)
    def game_state(game_id: str) -> GameStateResponse:
        try:
            return message_router.service.get_game_state(game_id)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @router.get(
        "/games/{game_id}/legal-moves",
        response_model=LegalMovesResponse,
        response_model_by_alias=True,
    )
    def legal_moves(
        game_id: str,
        from_index: int = Query(ge=0, lt=BOARD_SIZE, alias="fromIndex"),
    ) -> LegalMovesResponse:
        try:
            return message_router.service.legal_moves(game_id, from_index)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except InvalidRequestError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    return router
