"""Pure bingo helpers: line detection, rankings and random board fill."""
import random
from datetime import datetime, timezone
from typing import Optional, Sequence

from models.domain_models import Game, Player

# Used for random fill when the room has no usable word list of its own
SAMPLE_WORDS = (
	"apple", "banana", "cherry", "grape", "lemon", "mango", "melon", "peach",
	"pear", "plum", "kiwi", "lime", "orange", "papaya", "guava", "fig",
	"apricot", "coconut", "olive", "date", "quince", "lychee", "durian",
	"persimmon", "pomelo", "raisin", "tomato", "walnut", "almond", "hazelnut",
)

_NEVER = datetime.max.replace(tzinfo=timezone.utc)


def detect_lines(marked: Sequence[bool], size: int) -> set[str]:
	"""Return every completed line of a row-major `size` x `size` grid.

	Lines are named `row-i`, `col-i`, `diag-1` (top-left to bottom-right)
	and `diag-2` (top-right to bottom-left). Malformed input, a wrong length
	or a size below one, yields an empty set.
	"""
	if size < 1 or len(marked) != size * size:
		return set()

	def cell(row: int, col: int) -> bool:
		return bool(marked[row * size + col])

	lines = set()
	for i in range(size):
		if all(cell(i, j) for j in range(size)):
			lines.add(f"row-{i}")
		if all(cell(j, i) for j in range(size)):
			lines.add(f"col-{i}")
	if all(cell(i, i) for i in range(size)):
		lines.add("diag-1")
	if all(cell(i, size - 1 - i) for i in range(size)):
		lines.add("diag-2")
	return lines


def rank_players(game: Game) -> list[Player]:
	"""Final standings of everyone who played (the host is left out).

	Most lines first. Ties go to winners, then to whoever reached the win
	condition earliest, then to the order of `game.winners`, then join order.
	"""
	winner_order = {nickname: pos for pos, nickname in enumerate(game.winners)}
	players = [game.players[pid] for pid in game.player_ids()]

	def key(item):
		join_pos, player = item
		return (
			-player.bingo_count,
			not player.is_winner,
			player.last_bingo_timestamp or _NEVER,
			winner_order.get(player.nickname, len(winner_order)),
			join_pos,
		)

	return [player for _, player in sorted(enumerate(players), key=key)]


def random_fill_board(game: Game, rng: Optional[random.Random] = None) -> list[str]:
	"""Pick `size*size` distinct words for a board.

	Uses the room's own word list when random fill is enabled and the list
	is long enough, otherwise the built-in sample words.
	"""
	rng = rng or random.Random()
	needed = game.cell_count

	pool = list(dict.fromkeys(w.strip() for w in game.random_words if w and w.strip()))
	if not (game.is_random_fill_enabled and len(pool) >= needed):
		pool = list(SAMPLE_WORDS)
	if len(pool) < needed:
		raise ValueError(f"Not enough words to fill a {game.size}x{game.size} board")
	return rng.sample(pool, needed)
