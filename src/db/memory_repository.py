"""
Implementation of SessionRepository keeping everything in process memory.

Concurrency discipline
----
Each session has its own asyncio.Lock. The router holds it for the whole handling of a request
(validate, apply, broadcast), so two moves are never validated against the same board concurrently.
Requests for different sessions do not block each other. Sessions are not persisted: a restart forgets them.
"""

import asyncio
import logging
from typing import Callable, Iterator
from uuid import uuid4

from src.towers.session import GameSession

logger = logging.getLogger(__name__)

CodeFactory = Callable[[], str]


def random_room_code(length: int = 6) -> str:
    """Short upper-case code players can share, ex) '3F9A1C'"""
    return uuid4().hex[:length].upper()


class InMemorySessionRepository:
    """The process-wide registry of running sessions, keyed by room code."""

    def __init__(self, code_factory: CodeFactory = random_room_code) -> None:
        self._sessions: dict[str, GameSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._new_code = code_factory

    def create_session(self, player: str, connection_id: str) -> GameSession:
        """Store a new session under a freshly generated room code."""
        game_id = self._new_code()
        while game_id in self._sessions:
            game_id = self._new_code()
        session = GameSession.new_session(game_id, player, connection_id)
        self._sessions[game_id] = session
        logger.info("Created game %s for %r", game_id, player)
        return session

    def get_session(self, game_id: str) -> GameSession | None:
        """Get session by room code, if it exists."""
        return self._sessions.get(game_id)

    def remove_session(self, game_id: str) -> GameSession | None:
        """Forget a session (and its lock)."""
        self._locks.pop(game_id, None)
        session = self._sessions.pop(game_id, None)
        if session is not None:
            logger.info("Removed game %s", game_id)
        return session

    def sessions(self) -> Iterator[GameSession]:
        # copy, so callers may remove sessions while iterating
        return iter(list(self._sessions.values()))

    def lock(self, game_id: str) -> asyncio.Lock:
        if game_id not in self._sessions:
            # unknown room: nothing to protect, and nothing worth remembering
            return asyncio.Lock()
        return self._locks.setdefault(game_id, asyncio.Lock())

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._sessions

    def clear(self) -> None:
        self._sessions.clear()
        self._locks.clear()
