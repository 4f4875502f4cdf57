"""
Helpers shared by the game routes.

They translate between HTTP and the state machine: dependency wiring,
host authorization, error-to-status mapping and feedback scheduling.
"""

import logging

from fastapi import Depends
from fastapi.responses import JSONResponse

import config
from models import Game
from services import GameStateMachine
from stores import (
	GameStore,
	get_game_store,
	GameStoreError,
	LockBusy,
	GameNotFound,
	RoomNotFound,
	PlayerNotFound,
	HostOnlyAction,
	RoomCodeUnavailable,
)

logger = logging.getLogger(__name__)


_STATUS_BY_ERROR = (
	(LockBusy, 409),
	(GameNotFound, 404),
	(RoomNotFound, 404),
	(PlayerNotFound, 404),
	(HostOnlyAction, 403),
	(RoomCodeUnavailable, 503),
)


async def get_state_machine(store: GameStore = Depends(get_game_store)) -> GameStateMachine:
	return GameStateMachine(store)


def game_error_response(exc: GameStoreError) -> JSONResponse:
	"""Render a domain error with the best-known game snapshot."""
	status_code = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
	game = exc.game.model_dump(mode="json") if exc.game is not None else None
	return JSONResponse(status_code=status_code, content={"error": exc.message, "game": game})


async def load_game(machine: GameStateMachine, game_id: str) -> Game:
	game = await machine.get_game(game_id)
	if game is None:
		raise GameNotFound(f"Game {game_id} not found")
	return game


async def require_host(machine: GameStateMachine, game_id: str, user_id: str) -> Game:
	"""Return the game if `user_id` is its host.

	Raises:
		GameNotFound: if the game does not exist
		HostOnlyAction: if the caller is not the host
	"""
	game = await load_game(machine, game_id)
	if game.host_id != user_id:
		raise HostOnlyAction(game=game)
	return game


def schedule_feedback(game_id: str, player_id: str, called_word: str) -> None:
	"""Queue feedback generation for a finished turn. Never fails the turn."""
	if not config.FEEDBACK_ENABLED:
		return
	try:
		from workers.tasks import generate_turn_feedback
		generate_turn_feedback.apply_async(
			args=[game_id, player_id, called_word],
			ignore_result=True,
		)
		logger.info(f"Scheduled feedback for {player_id} in {game_id}")
	except Exception as exc:
		# Log but don't fail the turn if scheduling fails
		logger.error(f"Failed to schedule feedback for {game_id}: {exc}")
