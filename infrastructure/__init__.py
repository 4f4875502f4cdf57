"""Infrastructure helpers (Redis).

Expose a small public surface for the Redis client used by the stores.
"""
from .redis import RedisClient, create_redis_client

__all__ = [
    "RedisClient",
    "create_redis_client",
]
