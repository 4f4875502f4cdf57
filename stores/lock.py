"""Advisory per-game lock built on the store's atomic set-if-absent."""
from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging
import uuid

import config
from .exceptions import LockBusy
from .game_store import GameStore, lock_key

logger = logging.getLogger(__name__)


class GameLock:
    """Fail-fast, non-reentrant mutual exclusion per game id.

    The lock key expires on its own after `timeout_seconds`, so a holder
    that dies between acquire and release only blocks the game briefly.
    """

    def __init__(self, store: GameStore, timeout_seconds: int = config.LOCK_TIMEOUT_SECONDS):
        self.store = store
        self.timeout_seconds = timeout_seconds

    async def acquire(self, game_id: str) -> str:
        """Take the lock for `game_id` and return a token. Raises LockBusy if held."""
        token = str(uuid.uuid4())
        acquired = await self.store.set_if_absent(lock_key(game_id), token, self.timeout_seconds)
        if not acquired:
            logger.warning(f"[LOCK] Game {game_id} is currently locked")
            raise LockBusy(f"Game {game_id} is busy, please try again")
        return token

    async def release(self, game_id: str) -> None:
        """Drop the lock unconditionally."""
        await self.store.delete(lock_key(game_id))

    @asynccontextmanager
    async def hold(self, game_id: str) -> AsyncIterator[str]:
        """Hold the lock for the body of an `async with` block.

        The lock is released on every exit path, including exceptions
        raised by the body.
        """
        token = await self.acquire(game_id)
        try:
            yield token
        finally:
            await self.release(game_id)
