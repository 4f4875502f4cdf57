"""HTTP-level tests against the FastAPI app with an in-memory store."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

import main
import stores
from routes import games_helpers
from services import GameStateMachine
from stores import InMemoryGameStore, feedback_key
from utils.cookies import SESSION_COOKIE
from tests.conftest import make_board


@pytest.fixture
def store():
    store = InMemoryGameStore()
    main.app.dependency_overrides[stores.get_game_store] = lambda: store
    yield store
    main.app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def scheduled(monkeypatch):
    calls = []
    monkeypatch.setattr(games_helpers, "schedule_feedback", lambda *args: calls.append(args))
    return calls


@pytest.fixture
def client(store):
    """A browser with no session yet."""
    return TestClient(main.app)


@pytest.fixture
def as_user(store):
    """Return a browser whose session cookie identifies `user_id`."""
    clients = {}

    def build(user_id):
        if user_id not in clients:
            clients[user_id] = TestClient(main.app, cookies={SESSION_COOKIE: user_id})
        return clients[user_id]

    return build


def _post(client, path, **body):
    return client.post(f"/games/api/{path}", json=body)


def _lobby(as_user, size=3, win_condition=1, end_condition=1, players=("a", "b")):
    game = _post(as_user("host"), "create_room", nickname="Host", topic="fruit",
                 size=size, win_condition=win_condition, end_condition=end_condition).json()["game"]
    for pid in players:
        _post(as_user(pid), "join_room", room_code=game["room_code"], nickname=pid.upper())
        _post(as_user(pid), "submit_board", game_id=game["id"], board=make_board(size, pid))
    return game


def _started_game(as_user, **kwargs):
    game = _lobby(as_user, **kwargs)
    return _post(as_user("host"), "start_game", game_id=game["id"]).json()["game"]


def test_session_sets_cookie(client):
    response = client.post("/games/api/session")

    assert response.status_code == 201
    session_id = response.json()["session_id"]
    assert session_id.startswith("user_")
    assert response.cookies.get(SESSION_COOKIE) == session_id


def test_session_cookie_identifies_the_caller(client):
    session_id = client.post("/games/api/session").json()["session_id"]

    response = _post(client, "create_room", nickname="Host", topic="fruit", size=3)

    assert response.status_code == 201
    assert response.json()["game"]["host_id"] == session_id


def test_body_id_is_accepted_before_a_session_exists(client):
    response = _post(client, "create_room", user_id="host", nickname="Host", size=3)

    assert response.status_code == 201
    assert response.json()["game"]["host_id"] == "host"
    assert response.cookies.get(SESSION_COOKIE) == "host"


def test_requests_without_identity_are_unauthorized(client):
    response = _post(client, "create_room", nickname="Host", size=3)

    assert response.status_code == 401


def test_create_room_validation(client):
    assert _post(client, "create_room", user_id="h", nickname="<bad>", size=3).status_code == 400
    assert _post(client, "create_room", user_id="h", nickname="Host", size=3, win_condition=9).status_code == 400
    assert _post(client, "create_room", user_id="h", nickname="Host", size=6).status_code == 422


def test_create_room_reports_exhausted_room_codes(client, store):
    game = _post(client, "create_room", user_id="h1", nickname="One", size=3).json()["game"]
    code = game["room_code"]
    main.app.dependency_overrides[games_helpers.get_state_machine] = (
        lambda: GameStateMachine(store, room_code_factory=lambda: code)
    )

    response = _post(TestClient(main.app), "create_room", user_id="h2", nickname="Two", size=3)

    assert response.status_code == 503
    assert asyncio.run(store.get(game["id"])).host_id == "h1"


def test_full_round(as_user, scheduled):
    game = _started_game(as_user)
    assert game["status"] == "playing"
    first, second = (game["turn"], "b" if game["turn"] == "a" else "a")

    response = _post(as_user(first), "call_word", game_id=game["id"], word="nothing")
    assert response.status_code == 200
    assert response.json()["game"]["turn"] == second
    assert scheduled == [(game["id"], first, "nothing")]

    # the other player's board holds the word, completing no line yet
    word = f"{first}0"
    response = _post(as_user(second), "call_word", game_id=game["id"], word=word)
    body = response.json()["game"]
    assert body["players"][first]["marked"][0] is True
    assert body["turn"] == first
    assert scheduled[-1] == (game["id"], second, word)

    fetched = as_user(first).get("/games/api/game", params={"game_id": game["id"]}).json()["game"]
    assert fetched == body


def test_ignored_calls_schedule_no_feedback(as_user, scheduled):
    game = _started_game(as_user)
    current = game["turn"]
    idle = "b" if current == "a" else "a"

    # repeating the caller's last word out of turn is still ignored
    _post(as_user(current), "call_word", game_id=game["id"], word="a0")
    response = _post(as_user(current), "call_word", game_id=game["id"], word="a0")

    assert response.status_code == 200
    assert response.json()["game"]["called_words"] == ["a0"]
    assert response.json()["game"]["turn"] == idle
    assert scheduled == [(game["id"], current, "a0")]


def test_host_only_actions(as_user):
    game = _started_game(as_user)

    for path, extra in (
        ("start_game", {}),
        ("set_turn", {"player_id": "a"}),
        ("resolve_word_request", {"request_id": "a-0", "approve": True}),
    ):
        response = _post(as_user("a"), path, game_id=game["id"], **extra)
        assert response.status_code == 403
        assert response.json()["game"]["id"] == game["id"]

    response = _post(as_user("host"), "set_turn", user_id="host", game_id=game["id"], player_id="b")
    assert response.json()["game"]["turn"] == "b"


def test_session_holder_cannot_claim_the_host_id(as_user, store):
    game = _lobby(as_user, players=("a",))

    response = _post(as_user("a"), "start_game", user_id="host", game_id=game["id"])

    assert response.status_code == 401
    assert asyncio.run(store.get(game["id"])).status == "waiting"


def test_host_actions_require_a_session(client, as_user, store):
    game = _lobby(as_user, players=("a",))

    for path, extra in (
        ("start_game", {}),
        ("set_turn", {"player_id": "a"}),
        ("resolve_word_request", {"request_id": "a-0", "approve": True}),
    ):
        response = _post(client, path, user_id="host", game_id=game["id"], **extra)
        assert response.status_code == 401

    assert asyncio.run(store.get(game["id"])).status == "waiting"


def test_error_statuses(client, as_user):
    assert client.get("/games/api/game", params={"game_id": "game:NOPE1"}).status_code == 404
    assert _post(as_user("x"), "join_room", room_code="NOPE1", nickname="X").status_code == 404

    game = _lobby(as_user, players=())
    _post(as_user("a"), "join_room", room_code=game["room_code"], nickname="A")

    taken = _post(as_user("b"), "join_room", room_code=game["room_code"], nickname="A")
    assert taken.status_code == 400
    assert "b" not in taken.json()["game"]["players"]

    bad_board = _post(as_user("a"), "submit_board", game_id=game["id"], board=["x"] * 9)
    assert bad_board.status_code == 400
    assert bad_board.json()["game"]["players"]["a"]["is_ready"] is False

    not_ready = _post(as_user("host"), "start_game", game_id=game["id"])
    assert not_ready.status_code == 400
    assert not_ready.json()["game"]["status"] == "waiting"


def test_busy_game_returns_conflict_with_snapshot(as_user, store):
    game = _lobby(as_user, players=())
    _post(as_user("a"), "join_room", room_code=game["room_code"], nickname="A")

    asyncio.run(store.set_if_absent(stores.lock_key(game["id"]), "held", 5))
    response = _post(as_user("a"), "submit_board", game_id=game["id"], board=make_board(3))

    assert response.status_code == 409
    assert response.json()["game"]["players"]["a"]["board"] == []


def test_word_approval_flow(as_user):
    game = _started_game(as_user, win_condition=3)

    response = _post(as_user("a"), "request_word_approval", game_id=game["id"], word="a4", index=4)
    assert response.json()["game"]["word_requests"][0]["request_id"] == "a-4"

    duplicate = _post(as_user("a"), "request_word_approval", game_id=game["id"], word="a4", index=4)
    assert duplicate.status_code == 400

    response = _post(as_user("host"), "resolve_word_request", game_id=game["id"], request_id="a-4", approve=True)
    body = response.json()["game"]
    assert body["word_requests"] == []
    assert body["players"]["a"]["marked"][4] is True


def test_word_approval_needs_a_game_in_play(as_user):
    game = _lobby(as_user, players=("a",))

    response = _post(as_user("a"), "request_word_approval", game_id=game["id"], word="a0", index=0)

    assert response.status_code == 400
    assert response.json()["game"]["word_requests"] == []


def test_rankings_and_random_board(client, as_user):
    game = _started_game(as_user)
    ranking = client.get("/games/api/rankings", params={"game_id": game["id"]}).json()
    assert [entry["rank"] for entry in ranking] == [1, 2]
    assert {entry["player_id"] for entry in ranking} == {"a", "b"}

    board = client.get("/games/api/random_board", params={"game_id": game["id"]}).json()["board"]
    assert len(board) == 9 and len(set(board)) == 9


def test_feedback_endpoint(client, store):
    assert client.get("/games/api/feedback", params={"game_id": "game:ROOM1"}).json() == {
        "player_id": None,
        "feedback": None,
    }

    payload = {"player_id": "a", "called_word": "kiwi", "feedback": "Great pick!", "generated_at": "now"}
    asyncio.run(store.set_raw(feedback_key("game:ROOM1"), json.dumps(payload), 60))

    assert client.get("/games/api/feedback", params={"game_id": "game:ROOM1"}).json() == {
        "player_id": "a",
        "feedback": "Great pick!",
    }
