"""Protocol repository: where live sessions are kept between messages."""

import asyncio
from typing import Iterator, Protocol

from src.towers.session import GameSession


class SessionRepository(Protocol):
    """Session lifecycle orchestration"""

    def create_session(self, player: str, connection_id: str) -> GameSession:
        """Store a new session under a freshly generated room code."""
        ...

    def get_session(self, game_id: str) -> GameSession | None:
        """Get session by room code, if it exists."""
        ...

    def remove_session(self, game_id: str) -> GameSession | None:
        """Forget a session."""
        ...

    def sessions(self) -> Iterator[GameSession]:
        """Iterate over all live sessions."""
        ...

    def lock(self, game_id: str) -> asyncio.Lock:
        """Exclusive access to one session. Held while a request is validated, applied and broadcast."""
        ...
