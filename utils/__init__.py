"""Utility helpers used across the project.

Make commonly used helpers available at the package level for convenience.

Exports:
- cookie helpers: `set_cookie`, `get_cookie`, `set_session_cookie`, `resolve_user_id`
- id helpers: `new_room_code`, `new_session_id`
- time helpers: `now_utc`, `to_iso`
- validation helpers: `is_valid_name`, `validate_board`, `normalize_word`, `VALID_NAME_RE`
- logging: `configure_logging`
"""

from .cookies import set_cookie, get_cookie, set_session_cookie, resolve_user_id, UnauthorizedException
from .ids import new_room_code, new_session_id
from .time import now_utc, to_iso
from .validation import is_valid_name, validate_board, normalize_word, VALID_NAME_RE
from .logging_utils import configure_logging

__all__ = [
	"set_cookie",
	"get_cookie",
	"set_session_cookie",
	"resolve_user_id",
	"UnauthorizedException",
	"new_room_code",
	"new_session_id",
	"now_utc",
	"to_iso",
	"is_valid_name",
	"validate_board",
	"normalize_word",
	"VALID_NAME_RE",
	"configure_logging",
]
