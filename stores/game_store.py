from abc import ABC, abstractmethod
from typing import Optional

from models.domain_models import Game


GAME_KEY_PREFIX = "game:"
LOCK_KEY_PREFIX = "lock:"
FEEDBACK_KEY_PREFIX = "feedback:"


def game_key(room_code: str) -> str:
    """Store key (and game id) for a room code: `game:<ROOMCODE>`."""
    return f"{GAME_KEY_PREFIX}{room_code.strip().upper()}"


def lock_key(game_id: str) -> str:
    return f"{LOCK_KEY_PREFIX}{game_id}"


def feedback_key(game_id: str) -> str:
    return f"{FEEDBACK_KEY_PREFIX}{game_id}"


# =========================
# GameStore Interface
# =========================

class GameStore(ABC):
    """
    Key-value collaborator holding game records, lock keys and feedback.

    Invariants:
    - Every write carries a time-to-live; nothing is stored forever
    - Game records are replaced wholesale, never patched field by field
    - `set_if_absent` is atomic; all locking is built on it
    """

    async def init(self) -> None:
        """Open connections. Stores without connections need not override."""

    async def close(self) -> None:
        """Release connections."""

    # -------------------------------------------------
    # Game records
    # -------------------------------------------------

    @abstractmethod
    async def get(self, key: str) -> Optional[Game]:
        """Return the game stored under `key`, or None when absent or expired."""

    @abstractmethod
    async def set(self, key: str, game: Game, ttl_seconds: int) -> None:
        """Replace the game stored under `key` and refresh its expiration."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove `key`. Missing keys are not an error."""

    # -------------------------------------------------
    # Raw values (locks, generated feedback)
    # -------------------------------------------------

    @abstractmethod
    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Atomically set `key` only if it does not exist. True if the value was written."""

    @abstractmethod
    async def get_raw(self, key: str) -> Optional[str]:
        """Return the string stored under `key`, or None."""

    @abstractmethod
    async def set_raw(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a plain string under `key` with an expiration."""
