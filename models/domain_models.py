"""Domain-level models used by services and stores.

A `Game` is an immutable value: state transitions never edit a game in
place, they build a replacement with `model_copy(update=...)` and hand it
to the store. The models serialize straight to the JSON stored in Redis.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class GameStatus(str, Enum):
	WAITING = "waiting"
	PLAYING = "playing"
	FINISHED = "finished"


class Player(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str
	nickname: str
	is_ready: bool = False
	board: list[str] = Field(default_factory=list)
	marked: list[bool] = Field(default_factory=list)
	bingo_count: int = 0
	is_winner: bool = False
	# set once, when the player first reaches the game's win condition
	last_bingo_timestamp: datetime | None = None


class WordRequest(BaseModel):
	"""A player's claim that a cell should be marked, pending host approval."""
	model_config = ConfigDict(frozen=True)

	request_id: str
	user_id: str
	nickname: str
	word: str
	index: int

	@staticmethod
	def make_request_id(user_id: str, index: int) -> str:
		return f"{user_id}-{index}"


class Game(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str
	host_id: str
	room_code: str
	topic: str = ""
	size: int = Field(ge=1)
	win_condition: int = Field(ge=1)
	end_condition: int = Field(ge=1)
	is_random_fill_enabled: bool = False
	random_words: list[str] = Field(default_factory=list)
	status: GameStatus = GameStatus.WAITING
	players: dict[str, Player] = Field(default_factory=dict)
	called_words: list[str] = Field(default_factory=list)
	turn: str | None = None
	winners: list[str] = Field(default_factory=list)
	word_requests: list[WordRequest] = Field(default_factory=list)

	@property
	def cell_count(self) -> int:
		return self.size * self.size

	def player_ids(self) -> list[str]:
		"""Ids of everyone who plays, in join order. The host only moderates."""
		return [pid for pid in self.players if pid != self.host_id]

	def get_player(self, player_id: str) -> Player | None:
		return self.players.get(player_id)

	def find_request(self, request_id: str) -> WordRequest | None:
		for request in self.word_requests:
			if request.request_id == request_id:
				return request
		return None


__all__ = ["GameStatus", "Player", "WordRequest", "Game"]
