from typing import Optional

try:
    import redis.asyncio as redis
except Exception as e:
    raise ImportError(
        "redis.asyncio is required for infrastructure.redis. Install 'redis>=5.0'."
    ) from e


class RedisClient:
    """Pooled async Redis connection exposing the key-level commands the stores use.

    Every write carries an expiration; nothing is stored forever.

    Usage:
        client = RedisClient("redis://localhost:6379/0")
        await client.init()
        await client.set_value("feedback:game:ABCDE", "...", ttl_seconds=60)
        await client.close()
    """

    def __init__(self, url: str, *, decode_responses: bool = True, health_check_interval: int = 30):
        self.url = url
        self.decode_responses = decode_responses
        self.health_check_interval = health_check_interval
        self._pool: Optional[redis.ConnectionPool] = None
        self._client: Optional[redis.Redis] = None

    async def init(self, *, ping: bool = True) -> None:
        """Open the connection pool. Must be awaited; calling it twice is harmless."""
        if self._client is not None:
            return
        self._pool = redis.ConnectionPool.from_url(
            self.url,
            decode_responses=self.decode_responses,
            health_check_interval=self.health_check_interval,
        )
        self._client = redis.Redis(connection_pool=self._pool)
        if ping:
            await self._client.ping()

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        await self._pool.disconnect()
        self._client = None
        self._pool = None

    def get(self) -> redis.Redis:
        """Return the underlying `redis.Redis` client. Raises if not initialized."""
        if self._client is None:
            raise RuntimeError("Redis client not initialized; call init() first")
        return self._client

    # ------ key-level commands ------

    async def get_value(self, key: str) -> Optional[str]:
        return await self.get().get(key)

    async def set_value(self, key: str, value: str, ttl_seconds: int) -> None:
        # SET key value EX ttl
        await self.get().set(key, value, ex=ttl_seconds)

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """SET key value NX EX ttl; True when the key was written."""
        return bool(await self.get().set(key, value, nx=True, ex=ttl_seconds))

    async def delete(self, key: str) -> None:
        await self.get().delete(key)


def create_redis_client(url: str, *, decode_responses: bool = True) -> RedisClient:
    """Create (but do not init) a RedisClient. Use `init()` to open."""
    return RedisClient(url, decode_responses=decode_responses)
