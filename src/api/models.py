"""Requests, direct replies and broadcast messages exchanged over the WebSocket (plus the read-only HTTP responses)"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Player
from src.towers.square import BOARD_SIZE

WireBoard = list[Optional[dict[str, Any]]]
BoardIndex = Annotated[int, Field(ge=0, lt=BOARD_SIZE)]

UNDO_MARKER = "(undo)"
NEW_GAME_MARKER = "(new game)"


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- REQUEST MODELS ---
class CreateRequest(WireModel):
    type: Literal["create"]
    name: str


class JoinRequest(WireModel):
    type: Literal["join"]
    game_id: str
    name: str


class MoveRequest(WireModel):
    type: Literal["move"]
    game_id: str
    move_index: BoardIndex
    to_index: BoardIndex


class UndoRequest(WireModel):
    type: Literal["undoRequest"]
    game_id: str


class UndoConfirm(WireModel):
    type: Literal["undoConfirm"]
    game_id: str


class NewGameRequest(WireModel):
    type: Literal["newGameRequest"]
    game_id: str


class NewGameConfirm(WireModel):
    type: Literal["newGameConfirm"]
    game_id: str


InboundMessage = Annotated[
    Union[
        CreateRequest,
        JoinRequest,
        MoveRequest,
        UndoRequest,
        UndoConfirm,
        NewGameRequest,
        NewGameConfirm,
    ],
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


def parse_inbound(raw: str | bytes) -> InboundMessage:
    """Decode one text frame. Anything that does not match a known request raises InvalidRequestError."""
    try:
        return _inbound_adapter.validate_json(raw)
    except ValidationError as exc:
        raise InvalidRequestError(f"Cannot interpret message: {exc.error_count()} error(s)") from exc


# --- OUTBOUND MODELS ---
class PlayerInfo(WireModel):
    name: str
    color: Player


class CreatedMessage(WireModel):
    type: Literal["created"] = "created"
    game_id: str
    color: Player


class StartMessage(WireModel):
    type: Literal["start"] = "start"
    board: WireBoard
    players: list[PlayerInfo]
    turn: Player
    last_move: Optional[str] = None


class UpdateMessage(WireModel):
    type: Literal["update"] = "update"
    board: WireBoard
    turn: Player
    last_move: str


class WinnerMessage(WireModel):
    type: Literal["winner"] = "winner"
    winner: Player
    board: WireBoard


class UndoRequestMessage(WireModel):
    type: Literal["undoRequest"] = "undoRequest"


class NewGameRequestMessage(WireModel):
    type: Literal["newGameRequest"] = "newGameRequest"


class ErrorMessage(WireModel):
    type: Literal["error"] = "error"
    message: str


# --- HTTP RESPONSE MODELS ---
class GameStateResponse(WireModel):
    game_id: str
    board: WireBoard
    players: list[PlayerInfo]
    turn: Player
    move_log: list[str]
    winner: Optional[Player] = None
    pending_undo: Optional[Player] = None
    pending_new_game: Optional[Player] = None


class LegalMovesResponse(WireModel):
    game_id: str
    from_index: int
    player: Player
    targets: list[int]
