"""
In-process key-value store with expiration, for local runs and tests.
"""
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from models.domain_models import Game
from .game_store import GameStore


class InMemoryGameStore(GameStore):
    """Dict-backed GameStore. Expired keys behave exactly like missing ones."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._data: Dict[str, Tuple[object, float]] = {}  # key : (value, expires_at)
        self._lock = threading.Lock()

    def _read(self, key: str):
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            del self._data[key]
            return None
        return value

    def _write(self, key: str, value, ttl_seconds: int) -> None:
        self._data[key] = (value, self._clock() + ttl_seconds)

    # PUBLIC_INTERFACE
    async def get(self, key: str) -> Optional[Game]:
        with self._lock:
            value = self._read(key)
            return value if isinstance(value, Game) else None

    # PUBLIC_INTERFACE
    async def set(self, key: str, game: Game, ttl_seconds: int) -> None:
        with self._lock:
            self._write(key, game, ttl_seconds)

    # PUBLIC_INTERFACE
    async def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    # PUBLIC_INTERFACE
    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        with self._lock:
            if self._read(key) is not None:
                return False
            self._write(key, value, ttl_seconds)
            return True

    # PUBLIC_INTERFACE
    async def get_raw(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read(key)
            return value if isinstance(value, str) else None

    # PUBLIC_INTERFACE
    async def set_raw(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._write(key, value, ttl_seconds)

    def ttl(self, key: str) -> Optional[float]:
        """Seconds until `key` expires, or None if it is absent."""
        with self._lock:
            entry = self._data.get(key)
            if entry is None or self._read(key) is None:
                return None
            return entry[1] - self._clock()
