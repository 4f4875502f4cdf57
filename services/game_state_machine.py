"""
Game state transitions.

Every mutating operation runs the same way: take the game's lock, load the
current record, check preconditions, build a replacement `Game`, persist it
with a fresh expiration, release the lock and return the new value.

Precondition failures raise a `GameStoreError` subclass whose `.game` holds
the unmodified snapshot; nothing is written in that case. Store I/O errors
propagate untouched. The lock is released on every path.
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional, Sequence, Tuple
import logging
import random

import config
from models.domain_models import Game, GameStatus, Player, WordRequest
from stores import (
    GameStore,
    GameLock,
    game_key,
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
    InvalidBoard,
    RoomCodeUnavailable,
)
from utils.ids import new_room_code
from utils.time import now_utc
from utils.validation import normalize_word
from .bingo import detect_lines

logger = logging.getLogger(__name__)

ROOM_CODE_ATTEMPTS = 5


class GameStateMachine:

    def __init__(
        self,
        store: GameStore,
        *,
        lock: Optional[GameLock] = None,
        ttl_seconds: int = config.GAME_EXPIRATION_SECONDS,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = now_utc,
        room_code_factory: Callable[[], str] = new_room_code,
    ):
        self.store = store
        self.lock = lock or GameLock(store)
        self.ttl_seconds = ttl_seconds
        self.rng = rng or random.Random()
        self.clock = clock
        self.room_code_factory = room_code_factory

    # -------------------------------------------------
    # Plumbing
    # -------------------------------------------------

    @asynccontextmanager
    async def _locked(self, game_id: str):
        try:
            async with self.lock.hold(game_id):
                yield
        except LockBusy as exc:
            # hand the caller the last committed state instead of nothing
            if exc.game is None:
                exc.game = await self.store.get(game_id)
            raise

    async def _load(self, game_id: str) -> Game:
        game = await self.store.get(game_id)
        if game is None:
            raise GameNotFound(f"Game {game_id} not found")
        return game

    async def _save(self, game: Game) -> Game:
        await self.store.set(game.id, game, self.ttl_seconds)
        return game

    def _score(self, game: Game, player: Player, marked: list[bool], winners: list[str]) -> Player:
        """Return `player` with new marks and recomputed lines.

        Appends the player's nickname to `winners` the first time the win
        condition is reached.
        """
        bingo_count = len(detect_lines(marked, game.size))
        update = {"marked": marked, "bingo_count": bingo_count}
        if bingo_count >= game.win_condition and not player.is_winner:
            update["is_winner"] = True
            update["last_bingo_timestamp"] = player.last_bingo_timestamp or self.clock()
            if player.nickname not in winners:
                winners.append(player.nickname)
            logger.info(f"[GAME] {game.id}: {player.nickname} wins with {bingo_count} lines")
        return player.model_copy(update=update)

    @staticmethod
    def _next_turn(game: Game) -> Optional[str]:
        ids = game.player_ids()
        if not ids:
            return game.turn
        if game.turn in ids:
            return ids[(ids.index(game.turn) + 1) % len(ids)]
        return ids[0]

    # -------------------------------------------------
    # Reads
    # -------------------------------------------------

    async def get_game(self, game_id: str) -> Optional[Game]:
        """Unlocked read; may be stale by the time the caller looks at it."""
        return await self.store.get(game_id)

    # -------------------------------------------------
    # Lobby
    # -------------------------------------------------

    async def create_room(
        self,
        host_id: str,
        host_nickname: str,
        topic: str,
        size: int,
        win_condition: int,
        end_condition: int,
        is_random_fill_enabled: bool = False,
        random_words: Sequence[str] = (),
    ) -> Game:
        """Create a room with the host as its only participant."""
        for _ in range(ROOM_CODE_ATTEMPTS):
            room_code = self.room_code_factory()
            if await self.store.get(game_key(room_code)) is None:
                break
            logger.warning(f"[GAME] Room code {room_code} already in use, drawing another")
        else:
            raise RoomCodeUnavailable()

        host = Player(id=host_id, nickname=host_nickname.strip())
        game = Game(
            id=game_key(room_code),
            host_id=host_id,
            room_code=room_code,
            topic=topic,
            size=size,
            win_condition=win_condition,
            end_condition=end_condition,
            is_random_fill_enabled=is_random_fill_enabled,
            random_words=list(random_words),
            players={host_id: host},
        )
        await self._save(game)
        logger.info(f"[GAME] Created {game.id} for host {host_id} (size={size})")
        return game

    async def join_room(self, room_code: str, user_id: str, nickname: str) -> Game:
        """Add a player to a waiting room. Joining twice with the same id is a no-op."""
        game_id = game_key(room_code)
        game = await self.store.get(game_id)
        if game is None:
            raise RoomNotFound(f"Room {room_code.strip().upper()} not found")
        if user_id in game.players:
            return game

        nickname = nickname.strip()
        async with self._locked(game_id):
            game = await self.store.get(game_id)
            if game is None:
                raise RoomNotFound(f"Room {room_code.strip().upper()} not found")
            if user_id in game.players:
                return game
            if any(p.nickname == nickname for p in game.players.values()):
                raise NicknameTaken(f"The nickname '{nickname}' is already taken", game=game)
            if game.status != GameStatus.WAITING:
                raise GameAlreadyStarted(game=game)

            players = {**game.players, user_id: Player(id=user_id, nickname=nickname)}
            game = await self._save(game.model_copy(update={"players": players}))
        logger.info(f"[GAME] {nickname} ({user_id}) joined {game_id}")
        return game

    async def submit_board(self, game_id: str, user_id: str, board: Sequence[str]) -> Game:
        """Install `board` for the player exactly as given and mark them ready.

        The board must already be validated (see `utils.validation.validate_board`).
        """
        async with self._locked(game_id):
            game = await self._load(game_id)
            player = game.get_player(user_id)
            if player is None:
                raise PlayerNotFound(f"Player {user_id} is not in this game", game=game)
            if game.status != GameStatus.WAITING:
                raise GameAlreadyStarted("Boards cannot change once the game has started", game=game)

            player = player.model_copy(update={
                "board": list(board),
                "marked": [False] * game.cell_count,
                "is_ready": True,
            })
            game = await self._save(game.model_copy(update={"players": {**game.players, user_id: player}}))
        logger.info(f"[GAME] {user_id} submitted a board in {game_id}")
        return game

    async def start_game(self, game_id: str) -> Game:
        """Move a waiting game to playing and hand the first turn to a random player."""
        async with self._locked(game_id):
            game = await self._load(game_id)
            if game.status != GameStatus.WAITING:
                raise GameAlreadyStarted(game=game)

            player_ids = game.player_ids()
            if not all(game.players[pid].is_ready for pid in player_ids):
                raise PlayersNotReady(game=game)
            if not player_ids:
                raise NotEnoughPlayers(game=game)

            order = list(player_ids)
            self.rng.shuffle(order)
            game = await self._save(game.model_copy(update={
                "status": GameStatus.PLAYING,
                "turn": order[0],
            }))
        logger.info(f"[GAME] {game_id} started, {game.turn} goes first")
        return game

    # -------------------------------------------------
    # Play
    # -------------------------------------------------

    async def call_word(self, game_id: str, user_id: str, word: str) -> Game:
        """Call `word` on behalf of the player whose turn it is. See `try_call_word`."""
        game, _ = await self.try_call_word(game_id, user_id, word)
        return game

    async def try_call_word(self, game_id: str, user_id: str, word: str) -> Tuple[Game, bool]:
        """Call `word` and report whether the call was accepted.

        Marks the word on every board (trimmed, case-insensitive), updates
        line counts and winners, then either finishes the game or passes
        the turn to the next player. Calls made out of turn, with a blank
        word, or while the game is not in play return the unchanged game
        and False.
        """
        async with self._locked(game_id):
            game = await self._load(game_id)
            if game.status != GameStatus.PLAYING or game.turn != user_id or not word or not word.strip():
                logger.debug(f"[GAME] Ignoring call from {user_id} in {game_id}")
                return game, False

            target = normalize_word(word)
            players = dict(game.players)
            winners = list(game.winners)
            for pid, player in game.players.items():
                marked = list(player.marked)
                changed = False
                for index, cell in enumerate(player.board[:len(marked)]):
                    if not marked[index] and normalize_word(cell) == target:
                        marked[index] = True
                        changed = True
                if changed:
                    players[pid] = self._score(game, player, marked, winners)

            update = {
                "called_words": [*game.called_words, word],
                "players": players,
                "winners": winners,
            }
            if len(winners) >= game.end_condition:
                update["status"] = GameStatus.FINISHED
            else:
                update["turn"] = self._next_turn(game)
            game = await self._save(game.model_copy(update=update))

        if game.status == GameStatus.FINISHED:
            logger.info(f"[GAME] {game_id} finished; winners: {game.winners}")
        return game, True

    async def set_turn(self, game_id: str, player_id: str) -> Game:
        """Hand the turn to `player_id`. Host authorization is checked by the caller."""
        async with self._locked(game_id):
            game = await self._load(game_id)
            if player_id not in game.player_ids():
                raise PlayerNotFound(f"Player {player_id} cannot take a turn", game=game)
            game = await self._save(game.model_copy(update={"turn": player_id}))
        logger.info(f"[GAME] Turn in {game_id} set to {player_id} by the host")
        return game

    # -------------------------------------------------
    # Word approval
    # -------------------------------------------------

    async def request_word_approval(self, game_id: str, user_id: str, word: str, index: int) -> Game:
        """Queue a request for the host to mark cell `index` on the player's board."""
        async with self._locked(game_id):
            game = await self._load(game_id)
            if game.status != GameStatus.PLAYING:
                raise GameNotInPlay("Words can only be claimed while the game is in play", game=game)
            player = game.get_player(user_id)
            if player is None:
                raise PlayerNotFound(game=game)
            if not 0 <= index < len(player.marked):
                raise InvalidBoard(f"Cell {index} is not on your board", game=game)

            request = WordRequest(
                request_id=WordRequest.make_request_id(user_id, index),
                user_id=user_id,
                nickname=player.nickname,
                word=word,
                index=index,
            )
            if game.find_request(request.request_id) is not None:
                raise DuplicateRequest(game=game)

            game = await self._save(game.model_copy(update={
                "word_requests": [*game.word_requests, request],
            }))
        logger.info(f"[GAME] {user_id} asked to mark '{word}' (cell {index}) in {game_id}")
        return game

    async def resolve_word_request(self, game_id: str, request_id: str, approve: bool) -> Game:
        """Drop a pending request; when approved, mark the cell and score the player."""
        async with self._locked(game_id):
            game = await self._load(game_id)
            if game.status != GameStatus.PLAYING:
                raise GameNotInPlay("Requests can only be resolved while the game is in play", game=game)
            request = game.find_request(request_id)
            update = {
                "word_requests": [r for r in game.word_requests if r.request_id != request_id],
            }

            player = game.get_player(request.user_id) if request else None
            if approve and player is not None and 0 <= request.index < len(player.marked):
                marked = list(player.marked)
                marked[request.index] = True
                winners = list(game.winners)
                update["players"] = {**game.players, player.id: self._score(game, player, marked, winners)}
                update["winners"] = winners
                if len(winners) >= game.end_condition:
                    update["status"] = GameStatus.FINISHED

            game = await self._save(game.model_copy(update=update))
        logger.info(f"[GAME] Request {request_id} in {game_id} {'approved' if approve else 'rejected'}")
        return game
