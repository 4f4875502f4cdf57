# Abstractions
from .game_store import GameStore, game_key, lock_key, feedback_key
from .lock import GameLock

# Exceptions
from .exceptions import (
    StoreError,
    GameStoreError,
    LockBusy,
    GameNotFound,
    RoomNotFound,
    NicknameTaken,
    GameAlreadyStarted,
    GameNotInPlay,
    PlayersNotReady,
    NotEnoughPlayers,
    PlayerNotFound,
    DuplicateRequest,
    RoomCodeUnavailable,
    HostOnlyAction,
    InvalidBoard,
)

# Concrete implementations
from .redis_game_store import RedisGameStore
from .memory_game_store import InMemoryGameStore

__all__ = [
    # Abstractions
    "GameStore",
    "GameLock",
    "game_key",
    "lock_key",
    "feedback_key",
    # Implementations
    "RedisGameStore",
    "InMemoryGameStore",
    # Exceptions
    "StoreError",
    "GameStoreError",
    "LockBusy",
    "GameNotFound",
    "RoomNotFound",
    "NicknameTaken",
    "GameAlreadyStarted",
    "GameNotInPlay",
    "PlayersNotReady",
    "NotEnoughPlayers",
    "PlayerNotFound",
    "DuplicateRequest",
    "RoomCodeUnavailable",
    "HostOnlyAction",
    "InvalidBoard",
]


# Runtime singleton and initialization helpers
from typing import Optional
import logging
import config

logger = logging.getLogger(__name__)

game_store: Optional[GameStore] = None


def create_game_store(url: Optional[str] = None) -> GameStore:
    """Build a new, unopened store according to configuration.

    Celery tasks use this to get a store bound to their own event loop
    instead of sharing the process singleton.
    """
    if config.USE_MEMORY_STORE:
        return InMemoryGameStore()
    return RedisGameStore(url or config.REDIS_URL)


async def init_stores(url: Optional[str] = None) -> GameStore:
    """Initialize the module-level store singleton for this process.

    Safe to call multiple times; initialization is idempotent.
    """
    global game_store
    if game_store is None:
        store = create_game_store(url)
        await store.init()
        game_store = store
        logger.info(f"[STORE] Using {type(store).__name__}")
    return game_store


async def close_stores() -> None:
    global game_store
    if game_store is not None:
        await game_store.close()
        game_store = None


async def get_game_store() -> GameStore:
    """Get game store, initializing if needed. Used as a FastAPI dependency."""
    return await init_stores()
