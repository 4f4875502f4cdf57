"""Tests for the in-memory store, the Redis store adapter and the game lock."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from infrastructure import RedisClient
from stores import (
    GameLock,
    GameNotFound,
    InMemoryGameStore,
    LockBusy,
    RedisGameStore,
    game_key,
    lock_key,
)
from tests.conftest import make_game, make_board


def test_key_helpers():
    assert game_key(" abc12 ") == "game:ABC12"
    assert lock_key("game:ABC12") == "lock:game:ABC12"


@pytest.mark.anyio
async def test_memory_store_expires_keys(store, clock):
    game = make_game()
    await store.set(game.id, game, 10)

    clock.advance(9)
    assert await store.get(game.id) == game
    clock.advance(1)
    assert await store.get(game.id) is None


@pytest.mark.anyio
async def test_memory_store_set_if_absent(store, clock):
    assert await store.set_if_absent("k", "one", 5) is True
    assert await store.set_if_absent("k", "two", 5) is False
    assert await store.get_raw("k") == "one"

    clock.advance(5)
    assert await store.set_if_absent("k", "three", 5) is True
    assert await store.get_raw("k") == "three"


@pytest.mark.anyio
async def test_memory_store_keeps_value_kinds_apart(store):
    game = make_game()
    await store.set(game.id, game, 10)
    await store.set_raw("plain", "text", 10)

    assert await store.get_raw(game.id) is None
    assert await store.get("plain") is None

    await store.delete(game.id)
    await store.delete("missing")
    assert await store.get(game.id) is None


@pytest.mark.anyio
async def test_lock_is_exclusive_until_released(store):
    lock = GameLock(store, timeout_seconds=5)

    token = await lock.acquire("game:A")
    assert token
    with pytest.raises(LockBusy):
        await lock.acquire("game:A")
    # other games are unaffected
    await lock.acquire("game:B")

    await lock.release("game:A")
    await lock.acquire("game:A")


@pytest.mark.anyio
async def test_lock_expires_on_its_own(store, clock):
    lock = GameLock(store, timeout_seconds=5)
    await lock.acquire("game:A")

    clock.advance(5)
    await lock.acquire("game:A")


@pytest.mark.anyio
async def test_hold_releases_on_error(store):
    lock = GameLock(store, timeout_seconds=5)

    with pytest.raises(RuntimeError):
        async with lock.hold("game:A"):
            assert await store.get_raw(lock_key("game:A")) is not None
            raise RuntimeError("boom")

    assert await store.get_raw(lock_key("game:A")) is None


def _redis_store():
    redis = MagicMock()
    redis.get = AsyncMock()
    redis.set = AsyncMock()
    redis.delete = AsyncMock()
    client = RedisClient("redis://unused")
    client.get = MagicMock(return_value=redis)
    return RedisGameStore(client.url, client=client), redis


@pytest.mark.anyio
async def test_redis_store_serializes_games_as_json():
    store, redis = _redis_store()
    game = make_game(boards={"a": make_board(3)})

    await store.set(game.id, game, 7200)

    key, payload = redis.set.await_args.args
    assert key == game.id
    assert redis.set.await_args.kwargs == {"ex": 7200}

    redis.get.return_value = payload
    assert await store.get(game.id) == game


@pytest.mark.anyio
async def test_redis_store_missing_and_corrupt_records():
    store, redis = _redis_store()

    redis.get.return_value = None
    assert await store.get("game:NOPE") is None

    redis.get.return_value = '{"id": 1}'
    with pytest.raises(GameNotFound):
        await store.get("game:BAD")


@pytest.mark.anyio
async def test_redis_store_set_if_absent_uses_nx():
    store, redis = _redis_store()
    redis.set.return_value = None

    assert await store.set_if_absent("lock:game:A", "token", 5) is False
    redis.set.assert_awaited_with("lock:game:A", "token", nx=True, ex=5)

    redis.set.return_value = True
    assert await store.set_if_absent("lock:game:A", "token", 5) is True


def test_redis_client_requires_init():
    with pytest.raises(RuntimeError):
        RedisClient("redis://unused").get()
