"""
Shared exception definitions for the game store and the state machine.

Hierarchy:
- StoreError (base for all store exceptions)
  - GameStoreError (game-specific errors, carry the best-known game snapshot)
"""


# =========================
# Base exception
# =========================

class StoreError(Exception):
    """Base exception for all store-related errors."""
    retryable: bool = True
    default_message: str = "Store error"

    def __init__(self, message: str | None = None, *, game=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        # Unmodified snapshot the caller can keep rendering, or None
        self.game = game


# =========================
# GameStore exceptions
# =========================

class GameStoreError(StoreError):
    """Base exception for game store errors."""
    retryable = True
    default_message = "Game operation failed"


class LockBusy(GameStoreError):
    retryable = True
    default_message = "The game is busy, please try again"


class GameNotFound(GameStoreError):
    retryable = False
    default_message = "Game not found"


class RoomNotFound(GameStoreError):
    retryable = False
    default_message = "Room not found"


class NicknameTaken(GameStoreError):
    retryable = False
    default_message = "That nickname is already taken"


class GameAlreadyStarted(GameStoreError):
    retryable = False
    default_message = "The game has already started"


class GameNotInPlay(GameStoreError):
    retryable = False
    default_message = "The game is not in play"


class PlayersNotReady(GameStoreError):
    retryable = False
    default_message = "Every player must submit a board before the game can start"


class NotEnoughPlayers(GameStoreError):
    retryable = False
    default_message = "At least one player besides the host must join before starting"


class PlayerNotFound(GameStoreError):
    retryable = False
    default_message = "Player not found"


class RoomCodeUnavailable(GameStoreError):
    retryable = True
    default_message = "No free room code could be found, please try again"


class DuplicateRequest(GameStoreError):
    retryable = False
    default_message = "You already asked for approval of that word"


class HostOnlyAction(GameStoreError):
    retryable = False
    default_message = "Only the host can do that"


class InvalidBoard(GameStoreError):
    retryable = False
    default_message = "Invalid board"
