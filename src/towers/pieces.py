"""
The two kinds of pieces that can occupy a square.

An empty square is simply `None`, so a Cell is `Guard | Stack | None`.
"""

from dataclasses import dataclass
from typing import Any, Optional

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import CellKind, Player

WireCell = Optional[dict[str, Any]]


@dataclass(frozen=True)
class Guard:
    player: Player

    def to_wire(self) -> dict[str, Any]:
        return {"kind": CellKind.GUARD.value, "player": self.player.value}


@dataclass(frozen=True)
class Stack:
    count: int
    player: Player

    def __post_init__(self):
        # a stack without tokens is an empty square, never a zero-count stack
        if self.count < 1:
            raise ValueError(f"Stack must hold at least one token, got {self.count}")

    def to_wire(self) -> dict[str, Any]:
        return {
            "kind": CellKind.STACK.value,
            "player": self.player.value,
            "count": self.count,
        }


Piece = Guard | Stack
Cell = Optional[Piece]


def cell_to_wire(cell: Cell) -> WireCell:
    return cell.to_wire() if cell is not None else None


def cell_from_wire(data: WireCell) -> Cell:
    """Parse a single board entry: None or {kind, player, count?}"""
    if data is None:
        return None

    try:
        kind = CellKind(data["kind"])
        player = Player(data["player"])
    except (KeyError, ValueError, TypeError) as exc:
        raise InvalidRequestError(f"Cannot interpret board cell: {data!r}") from exc

    if kind == CellKind.GUARD:
        return Guard(player)

    count = data.get("count")
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        raise InvalidRequestError(f"Stack needs a positive integer count: {data!r}")
    return Stack(count, player)


def with_count(stack: Stack, count: int) -> Cell:
    """Same owner, new token count. Zero tokens leaves the square empty."""
    if count == 0:
        return None
    return Stack(count, stack.player)
