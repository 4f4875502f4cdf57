"""Encouraging post-turn messages from an LLM, using LangChain.

Feedback is decoration: any failure (missing API key, network error, empty
answer) is absorbed here and replaced by a fixed fallback message.
"""
import logging
from typing import Any, Optional

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, Field

import config
from models.domain_models import Game

logger = logging.getLogger(__name__)


_prompt = PromptTemplate(
    input_variables=[
        "player_name",
        "bingo_count",
        "is_winner",
        "called_word",
        "remaining_players",
        "win_condition",
    ],
    template=(
        "You are a cheerful game master for a word bingo game. "
        "A player just finished their turn.\n"
        "- Player: {player_name}\n"
        "- Completed lines: {bingo_count} (lines needed to win: {win_condition})\n"
        "- Has won: {is_winner}\n"
        "- Word called this turn: {called_word}\n"
        "- Players still playing: {remaining_players}\n"
        "Write one short, upbeat sentence for the player. "
        "Celebrate a win, cheer them on when they are one line away, "
        "and mention the called word when it fits. Reply with the sentence only."
    ),
)


class FeedbackInput(BaseModel):
    player_name: str
    bingo_count: int = Field(ge=0)
    is_winner: bool
    called_word: str
    remaining_players: int = Field(ge=0)
    win_condition: int = Field(ge=1)


def build_feedback_input(game: Game, player_id: str, called_word: str) -> Optional[FeedbackInput]:
    """Summarize a turn for `player_id`, or None if they are not in the game."""
    player = game.get_player(player_id)
    if player is None:
        return None
    return FeedbackInput(
        player_name=player.nickname,
        bingo_count=player.bingo_count,
        is_winner=player.is_winner,
        called_word=called_word,
        remaining_players=max(len(game.player_ids()) - len(game.winners), 0),
        win_condition=game.win_condition,
    )


class FeedbackClient:
    """Generates feedback text; never raises."""

    def __init__(
        self,
        chain: Any = None,
        *,
        model: str = config.OPENAI_LLM_MODEL,
        fallback: str = config.FEEDBACK_FALLBACK,
    ):
        self._chain = chain
        self.model = model
        self.fallback = fallback

    def _get_chain(self):
        if self._chain is None:
            self._chain = _prompt | ChatOpenAI(model=self.model, temperature=0.8) | StrOutputParser()
        return self._chain

    async def generate(self, feedback_input: FeedbackInput) -> str:
        logger.info(f"[FEEDBACK] Requesting feedback for {feedback_input.player_name}")
        try:
            chain = self._get_chain()
            result = await chain.ainvoke(feedback_input.model_dump())
        except Exception:
            logger.exception("[FEEDBACK] LLM request failed")
            return self.fallback

        text = result.strip() if isinstance(result, str) else ""
        if not text:
            logger.warning("[FEEDBACK] LLM returned an empty answer")
            return self.fallback
        return text
