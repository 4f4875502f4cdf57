"""Opaque identifier generators for rooms and browser sessions."""
import secrets
import string

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits
ROOM_CODE_LENGTH = 5


def new_room_code() -> str:
	"""Return a 5-character uppercase alphanumeric room code."""
	return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def new_session_id() -> str:
	return f"user_{secrets.token_urlsafe(12)}"
