"""Shared fixtures: an in-memory store with a controllable clock and game builders."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from models import Game, GameStatus, Player
from services import GameStateMachine
from stores import InMemoryGameStore, game_key


class FakeClock:
    """Monotonic seconds for the store, advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWallClock:
    """Timezone-aware timestamps one second apart."""

    def __init__(self) -> None:
        self.current = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def anyio_backend() -> str:
    """Run AnyIO tests on asyncio only."""

    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryGameStore:
    return InMemoryGameStore(clock=clock)


@pytest.fixture
def machine(store: InMemoryGameStore) -> GameStateMachine:
    return GameStateMachine(store, rng=random.Random(1234), clock=FakeWallClock())


def make_board(size: int, prefix: str = "w") -> list[str]:
    return [f"{prefix}{i}" for i in range(size * size)]


def make_game(
    *,
    room_code: str = "ROOM1",
    size: int = 3,
    win_condition: int = 1,
    end_condition: int = 1,
    boards: dict[str, list[str]] | None = None,
    marked: dict[str, list[bool]] | None = None,
    status: GameStatus = GameStatus.PLAYING,
    turn: str | None = None,
) -> Game:
    """Build a game with a host plus one ready player per entry of `boards`.

    Player ids are the keys of `boards`; nicknames are the ids upper-cased.
    """
    boards = boards or {}
    marked = marked or {}
    players = {"host": Player(id="host", nickname="HOST")}
    for pid, board in boards.items():
        players[pid] = Player(
            id=pid,
            nickname=pid.upper(),
            is_ready=True,
            board=board,
            marked=marked.get(pid, [False] * (size * size)),
        )
    return Game(
        id=game_key(room_code),
        host_id="host",
        room_code=room_code,
        topic="fruit",
        size=size,
        win_condition=win_condition,
        end_condition=end_condition,
        status=status,
        players=players,
        turn=turn,
    )
