"""Celery task definitions for the bingo server."""
from celery import Task
from celery.exceptions import SoftTimeLimitExceeded
import asyncio
import json
import logging
from datetime import datetime, UTC
from functools import wraps
from typing import Any, Dict

import config
import stores
from services.feedback import FeedbackClient, build_feedback_input
from stores import GameNotFound, PlayerNotFound, feedback_key
from utils.time import now_utc, to_iso
from workers.celery_app import app

logger = logging.getLogger(__name__)

soft_time_limit = 30  # seconds
hard_time_limit = 60  # seconds


def celery_task(**task_kwargs):
	"""Combined decorator that registers a Celery task and adds error handling.

	- Registers the function as a Celery task via @app.task()
	- Wraps execution with error handling (SoftTimeLimitExceeded, generic exceptions)
	- For retryable exceptions: logs and re-raises to allow Celery's autoretry mechanism
	- For non-retryable exceptions: logs and returns graceful failure dict
	"""
	def decorator(func):
		@wraps(func)
		def wrapper(self, *args, **kwargs):
			try:
				return func(self, *args, **kwargs)
			except SoftTimeLimitExceeded:
				logger.warning(f"{func.__name__} exceeded soft time limit, graceful shutdown")
				raise
			except Exception as exc:
				# Unknown exceptions (connection errors and the like) are retryable
				is_retryable = getattr(exc, "retryable", True)

				if not is_retryable:
					logger.error(f"{func.__name__} failed with non-retryable error: {exc.__class__.__name__}: {exc}")
					return {
						"status": "failure",
						"error": exc.__class__.__name__,
						"message": str(exc),
						"timestamp": datetime.now(UTC).isoformat(),
					}
				logger.error(f"{func.__name__} failed with retryable error: {exc.__class__.__name__}: {exc}", exc_info=True)
				raise
		return app.task(base=BingoTask, **task_kwargs)(wrapper)
	return decorator


class BingoTask(Task):
    """Base task class with retry policy and logging."""

    autoretry_for = (Exception,)
    retry_kwargs = {"max_retries": 3}
    retry_backoff = True
    retry_backoff_max = 30
    retry_jitter = True

    def on_retry(self, exc: Exception, task_id: str, args: tuple, kwargs: dict, einfo: Any) -> None:
        logger.warning(
            f"Task {self.name} (id={task_id}) retrying after {exc}",
            extra={"task_id": task_id, "task_args": args, "task_kwargs": kwargs},
        )

    def on_failure(self, exc: Exception, task_id: str, args: tuple, kwargs: dict, einfo: Any) -> None:
        logger.error(
            f"Task {self.name} (id={task_id}) failed with {exc}",
            extra={"task_id": task_id, "task_args": args, "task_kwargs": kwargs},
            exc_info=einfo,
        )

    def on_success(self, result: Any, task_id: str, args: tuple, kwargs: dict) -> None:
        logger.info(
            f"Task {self.name} (id={task_id}) succeeded",
            extra={"task_id": task_id, "task_result": result},
        )


async def _generate_and_store(game_id: str, player_id: str, called_word: str) -> Dict[str, Any]:
	# A fresh store per run: asyncio.run() gives every task its own event loop
	store = stores.create_game_store()
	await store.init()
	try:
		game = await store.get(game_id)
		if game is None:
			raise GameNotFound(f"Game {game_id} not found")
		feedback_input = build_feedback_input(game, player_id, called_word)
		if feedback_input is None:
			raise PlayerNotFound(f"Player {player_id} is not in game {game_id}")

		text = await FeedbackClient().generate(feedback_input)
		payload = {
			"player_id": player_id,
			"called_word": called_word,
			"feedback": text,
			"generated_at": to_iso(now_utc()),
		}
		await store.set_raw(feedback_key(game_id), json.dumps(payload), config.GAME_EXPIRATION_SECONDS)
		return payload
	finally:
		await store.close()


@celery_task(
	bind=True,
	name="workers.tasks.generate_turn_feedback",
	queue="feedback",
	soft_time_limit=soft_time_limit,
	time_limit=hard_time_limit,
)
def generate_turn_feedback(self, game_id: str, player_id: str, called_word: str) -> Dict[str, Any]:
	"""
	Generate encouragement for the player who just called a word and store it
	under `feedback:<game_id>` so polling clients can pick it up.

	Returns:
		dict: {"status": "success", "player_id", "called_word", "feedback", "generated_at"}
		or a failure dict when the game or player no longer exists.
	"""
	logger.info(f"generate_turn_feedback called for game_id={game_id} player_id={player_id}")
	payload = asyncio.run(_generate_and_store(game_id, player_id, called_word))
	return {"status": "success", **payload}
