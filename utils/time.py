"""Time utilities: timezone-aware helpers and ISO formatting.

These helpers keep code that deals with timestamps consistent across modules.
"""
from datetime import datetime, timezone


def now_utc() -> datetime:
	"""Return current UTC datetime with tzinfo set."""
	return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
	"""Serialize a datetime to ISO8601 string."""
	return dt.isoformat()
