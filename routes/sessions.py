from fastapi import APIRouter
from fastapi.responses import JSONResponse
import logging

from models import SessionResponse
from utils.cookies import set_session_cookie
from utils.ids import new_session_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/session", status_code=201)
async def create_session():
	"""Issue a new opaque player id and remember it in a cookie."""
	session_id = new_session_id()
	output = JSONResponse(status_code=201, content=SessionResponse(session_id=session_id).model_dump())
	return set_session_cookie(output, session_id)
