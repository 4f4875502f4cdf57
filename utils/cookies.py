"""Cookie helpers for FastAPI request/response handling.

A browser session is identified by an opaque id kept in a cookie. Request
bodies may also carry the id explicitly, but once a session cookie is
present it is authoritative and a body naming someone else is refused.
"""
from typing import Optional
from fastapi import Request, Response


SESSION_COOKIE = "bingo_session"


class UnauthorizedException(Exception):
	"""Raised when a request carries no usable session id."""
	pass


def set_cookie(response: Response, key: str, value: str, *, expires: int = 2 * 24 * 60 * 60, httponly: bool = False) -> Response:
	"""Set a cookie on the given `Response` and return it.

	- `expires` is in seconds (defaults to 2 days).
	- `httponly` defaults to False so the client can read its own id.
	"""
	response.set_cookie(key=key, value=value, httponly=httponly, max_age=expires, expires=expires, samesite="lax")
	return response


def get_cookie(request: Request, key: str) -> Optional[str]:
	"""Return the cookie value from a `Request`, or `None` if missing."""
	return request.cookies.get(key)


def set_session_cookie(response: Response, session_id: str) -> Response:
	return set_cookie(response, SESSION_COOKIE, session_id)


def resolve_user_id(request: Request, explicit: Optional[str] = None, *, session_only: bool = False) -> str:
	"""Return the caller's id from the session cookie or the request body.

	- With a session cookie, the cookie is the identity; a body `user_id`
	  must match it.
	- Without one, the body id is accepted unless `session_only` is set
	  (used for host-only actions).

	Raises:
		UnauthorizedException: if no usable identity is present, or the body
			names a different user than the session.
	"""
	explicit = explicit.strip() if explicit else None
	cookie = get_cookie(request, SESSION_COOKIE)
	if cookie:
		if explicit and explicit != cookie:
			raise UnauthorizedException("The request names a different user than this session")
		return cookie
	if session_only:
		raise UnauthorizedException("This action needs a session cookie")
	if explicit:
		return explicit
	raise UnauthorizedException("No session found; request a session id first")
