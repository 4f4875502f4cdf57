"""Services package: game rules, state transitions and feedback.

Import submodules to make them available as `services.game_state_machine`,
etc.
"""

from .bingo import (
	detect_lines,
	rank_players,
	random_fill_board,
)
from .game_state_machine import GameStateMachine
from .feedback import (
	FeedbackClient,
	FeedbackInput,
	build_feedback_input,
)

__all__ = [
	"detect_lines",
	"rank_players",
	"random_fill_board",
	"GameStateMachine",
	"FeedbackClient",
	"FeedbackInput",
	"build_feedback_input",
]
