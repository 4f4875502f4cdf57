"""Data models used by the application.

Split into:
- `api_models`: Pydantic models used for request/response validation
- `domain_models`: immutable game records used in business logic and storage

Import submodules to make them available as `models.api_models`.
"""

from . import api_models, domain_models

# Re-export API models (Pydantic models used for request/response)
from .api_models import (
	BaseModelPlus,
	GameRequest,
	CreateRoomRequest,
	JoinRoomRequest,
	SubmitBoardRequest,
	StartGameRequest,
	CallWordRequest,
	SetTurnRequest,
	WordApprovalRequest,
	ResolveWordRequestRequest,
	SessionResponse,
	GameResponse,
	RankingEntry,
	FeedbackResponse,
)

# Re-export domain models
from .domain_models import (
	GameStatus,
	Player,
	WordRequest,
	Game,
)

__all__ = [
	# submodules
	"api_models",
	"domain_models",
	# api models
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
	# domain models
	"GameStatus",
	"Player",
	"WordRequest",
	"Game",
]
