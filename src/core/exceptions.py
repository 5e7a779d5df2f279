"""
Exceptions raised by the domain/service layers.

The router decides which of these a client ever gets to see (only SeatingError, as an `error` message).
"""


class GameError(Exception):
    """Top level exception for anything that goes wrong while handling a game."""


class InvalidRequestError(GameError):
    """Malformed request or payload that cannot be interpreted."""


class IllegalMoveError(GameError):
    """The rules do not allow the requested move."""


class SeatingError(GameError):
    """Cannot take a seat in the requested room (unknown code or both seats taken)."""


class GameStateError(GameError):
    """Operation does not fit the current state of the session."""


class SessionNotFoundError(GameStateError):
    pass


class NotSeatedError(GameStateError):
    pass


class NotYourTurnError(GameStateError):
    pass


class GameOverError(GameStateError):
    pass


class NothingToUndoError(GameStateError):
    pass


class NoPendingRequestError(GameStateError):
    pass
