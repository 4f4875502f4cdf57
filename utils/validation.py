"""Validation helpers used at the HTTP boundary.

The state machine installs boards exactly as given; everything that makes
a board or a nickname acceptable is checked here before the core runs.
"""
from typing import Sequence
import regex as re

from stores.exceptions import InvalidBoard


# Allow: any Unicode letter/mark/number, spaces, plus a small, explicit set of name punctuation
VALID_NAME_RE = re.compile(r"^[\p{L}\p{M}\p{N} .'\-_`’·]+$", flags=re.UNICODE)

MAX_NAME_LENGTH = 40
MAX_WORD_LENGTH = 60


def normalize_word(word: str) -> str:
	"""Form used for every word comparison: trimmed and case-folded."""
	return word.strip().casefold()


def is_valid_name(s: str) -> bool:
	"""Return True if `s` is a reasonable nickname.

	- Strips and enforces a sensible maximum length.
	- Uses Unicode-aware character class matching.
	"""
	if not s or s.isspace():
		return False
	s = s.strip()
	if len(s) > MAX_NAME_LENGTH:
		return False
	return bool(VALID_NAME_RE.match(s))


def validate_board(board: Sequence[str], size: int) -> list[str]:
	"""Check a submitted board and return it with every cell trimmed.

	Raises InvalidBoard when the board has the wrong number of cells,
	a blank or overlong cell, or two cells holding the same word.
	"""
	expected = size * size
	if len(board) != expected:
		raise InvalidBoard(f"The board needs exactly {expected} words, got {len(board)}")

	cleaned = []
	seen = set()
	for index, cell in enumerate(board):
		word = (cell or "").strip()
		if not word:
			raise InvalidBoard(f"Cell {index + 1} is empty; fill every cell of the board")
		if len(word) > MAX_WORD_LENGTH:
			raise InvalidBoard(f"Cell {index + 1} is longer than {MAX_WORD_LENGTH} characters")
		key = normalize_word(word)
		if key in seen:
			raise InvalidBoard(f"The word '{word}' appears more than once on the board")
		seen.add(key)
		cleaned.append(word)
	return cleaned
