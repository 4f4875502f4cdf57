from typing import Optional
import logging

from pydantic import ValidationError

from infrastructure.redis import RedisClient, create_redis_client
from models.domain_models import Game
from .exceptions import GameNotFound
from .game_store import GameStore

logger = logging.getLogger(__name__)


class RedisGameStore(GameStore):
    """GameStore backed by Redis; games are stored as JSON strings."""

    def __init__(self, url: str, *, client: RedisClient | None = None):
        self.url = url
        self._redis = client or create_redis_client(url)
        logger.info(f"[STORE] RedisGameStore initialized with url: {url}")

    async def init(self, *, ping: bool = True) -> None:
        """Open the Redis connection. Call this after construction."""
        await self._redis.init(ping=ping)
        logger.info("[STORE] Redis connection established")

    async def close(self) -> None:
        await self._redis.close()

    # -------------------------------------------------
    # Game records
    # -------------------------------------------------

    async def get(self, key: str) -> Optional[Game]:
        raw = await self._redis.get_value(key)
        if raw is None:
            return None
        try:
            return Game.model_validate_json(raw)
        except ValidationError as exc:
            logger.error(f"[STORE] Corrupt game record under {key}: {exc}")
            raise GameNotFound(f"Game {key} could not be read") from exc

    async def set(self, key: str, game: Game, ttl_seconds: int) -> None:
        await self._redis.set_value(key, game.model_dump_json(), ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)

    # -------------------------------------------------
    # Raw values
    # -------------------------------------------------

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        return await self._redis.set_if_absent(key, value, ttl_seconds)

    async def get_raw(self, key: str) -> Optional[str]:
        return await self._redis.get_value(key)

    async def set_raw(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._redis.set_value(key, value, ttl_seconds)
