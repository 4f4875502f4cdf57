"""Pydantic request/response models for the FastAPI endpoints.

Keep transport concerns (validation, docs) here and keep business/domain
types in `models.domain_models`. `user_id` may be omitted from any request
body; the routes then fall back to the session cookie.
"""
from __future__ import annotations

from pydantic import BaseModel, Field

from .domain_models import Game


# --- Common base models ---
class BaseModelPlus(BaseModel):
	user_id: str | None = None


class GameRequest(BaseModelPlus):
	game_id: str


class CreateRoomRequest(BaseModelPlus):
	nickname: str
	topic: str = ""
	size: int = Field(5, ge=3, le=5)
	win_condition: int = Field(3, ge=1)
	end_condition: int = Field(1, ge=1)
	is_random_fill_enabled: bool = False
	random_words: list[str] = Field(default_factory=list)


class JoinRoomRequest(BaseModelPlus):
	room_code: str
	nickname: str


class SubmitBoardRequest(GameRequest):
	board: list[str]


class StartGameRequest(GameRequest):
	pass


class CallWordRequest(GameRequest):
	word: str


class SetTurnRequest(GameRequest):
	player_id: str


class WordApprovalRequest(GameRequest):
	word: str
	index: int = Field(ge=0)


class ResolveWordRequestRequest(GameRequest):
	request_id: str
	approve: bool


class SessionResponse(BaseModel):
	session_id: str


class GameResponse(BaseModel):
	game: Game | None = None
	error: str | None = None


class RankingEntry(BaseModel):
	rank: int
	player_id: str
	nickname: str
	bingo_count: int
	is_winner: bool


class FeedbackResponse(BaseModel):
	player_id: str | None = None
	feedback: str | None = None


__all__ = [
	"BaseModelPlus",
	"GameRequest",
	"CreateRoomRequest",
	"JoinRoomRequest",
	"SubmitBoardRequest",
	"StartGameRequest",
	"CallWordRequest",
	"SetTurnRequest",
	"WordApprovalRequest",
	"ResolveWordRequestRequest",
	"SessionResponse",
	"GameResponse",
	"RankingEntry",
	"FeedbackResponse",
]
