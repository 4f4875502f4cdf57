from fastapi import APIRouter, Request, HTTPException, Depends
from fastapi.responses import JSONResponse
import json
import logging

from models import (
	CreateRoomRequest,
	JoinRoomRequest,
	SubmitBoardRequest,
	StartGameRequest,
	CallWordRequest,
	SetTurnRequest,
	WordApprovalRequest,
	ResolveWordRequestRequest,
	GameResponse,
	RankingEntry,
	FeedbackResponse,
)
from services import GameStateMachine, rank_players, random_fill_board
from stores import GameStoreError, feedback_key
from utils.cookies import resolve_user_id, set_session_cookie, UnauthorizedException
from utils.validation import is_valid_name, validate_board
from . import games_helpers
from .games_helpers import get_state_machine, game_error_response

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_NICKNAME = "Invalid nickname. (Use up to 40 letters, numbers, spaces, and .'-_`’· characters.)"


def _caller(request: Request, user_id: str | None, *, session_only: bool = False) -> str:
	try:
		return resolve_user_id(request, user_id, session_only=session_only)
	except UnauthorizedException as e:
		raise HTTPException(status_code=401, detail=str(e))


# --- Lobby ---
@router.post("/api/create_room", status_code=201)
async def create_room(request: Request, req: CreateRoomRequest, machine: GameStateMachine = Depends(get_state_machine)):
	host_id = _caller(request, req.user_id)
	if not is_valid_name(req.nickname):
		raise HTTPException(status_code=400, detail=INVALID_NICKNAME)
	if req.win_condition > 2 * req.size + 2:
		raise HTTPException(status_code=400, detail=f"A {req.size}x{req.size} board has only {2 * req.size + 2} lines")

	random_words = [w.strip() for w in req.random_words if w and w.strip()]
	logger.info(f"Creating room for host {host_id}")
	try:
		game = await machine.create_room(
			host_id,
			req.nickname,
			req.topic.strip(),
			req.size,
			req.win_condition,
			req.end_condition,
			req.is_random_fill_enabled,
			random_words,
		)
	except GameStoreError as e:
		return game_error_response(e)
	output = JSONResponse(status_code=201, content=GameResponse(game=game).model_dump(mode="json"))
	return set_session_cookie(output, host_id)


@router.post("/api/join_room")
async def join_room(request: Request, req: JoinRoomRequest, machine: GameStateMachine = Depends(get_state_machine)):
	user_id = _caller(request, req.user_id)
	if not is_valid_name(req.nickname):
		raise HTTPException(status_code=400, detail=INVALID_NICKNAME)
	try:
		game = await machine.join_room(req.room_code, user_id, req.nickname)
	except GameStoreError as e:
		logger.info(f"Join of {req.room_code} by {user_id} refused: {e}")
		return game_error_response(e)
	output = JSONResponse(content=GameResponse(game=game).model_dump(mode="json"))
	return set_session_cookie(output, user_id)


@router.get("/api/game", response_model=GameResponse)
async def get_game(game_id: str, machine: GameStateMachine = Depends(get_state_machine)):
	game = await machine.get_game(game_id)
	if game is None:
		raise HTTPException(status_code=404, detail="Game not found")
	return GameResponse(game=game)


@router.post("/api/submit_board", response_model=GameResponse)
async def submit_board(request: Request, req: SubmitBoardRequest, machine: GameStateMachine = Depends(get_state_machine)):
	user_id = _caller(request, req.user_id)
	try:
		game = await games_helpers.load_game(machine, req.game_id)
		try:
			board = validate_board(req.board, game.size)
		except GameStoreError as e:
			e.game = game
			raise
		game = await machine.submit_board(req.game_id, user_id, board)
	except GameStoreError as e:
		return game_error_response(e)
	return GameResponse(game=game)


@router.post("/api/start_game", response_model=GameResponse)
async def start_game(request: Request, req: StartGameRequest, machine: GameStateMachine = Depends(get_state_machine)):
	user_id = _caller(request, req.user_id, session_only=True)
	try:
		await games_helpers.require_host(machine, req.game_id, user_id)
		game = await machine.start_game(req.game_id)
	except GameStoreError as e:
		return game_error_response(e)
	return GameResponse(game=game)


# --- Play ---
@router.post("/api/call_word", response_model=GameResponse)
async def call_word(request: Request, req: CallWordRequest, machine: GameStateMachine = Depends(get_state_machine)):
	user_id = _caller(request, req.user_id)
	try:
		game, accepted = await machine.try_call_word(req.game_id, user_id, req.word)
	except GameStoreError as e:
		return game_error_response(e)

	if accepted:
		games_helpers.schedule_feedback(game.id, user_id, req.word)
	return GameResponse(game=game)


@router.post("/api/set_turn", response_model=GameResponse)
async def set_turn(request: Request, req: SetTurnRequest, machine: GameStateMachine = Depends(get_state_machine)):
	user_id = _caller(request, req.user_id, session_only=True)
	try:
		await games_helpers.require_host(machine, req.game_id, user_id)
		game = await machine.set_turn(req.game_id, req.player_id)
	except GameStoreError as e:
		return game_error_response(e)
	return GameResponse(game=game)


# --- Word approval ---
@router.post("/api/request_word_approval", response_model=GameResponse)
async def request_word_approval(request: Request, req: WordApprovalRequest, machine: GameStateMachine = Depends(get_state_machine)):
	user_id = _caller(request, req.user_id)
	try:
		game = await machine.request_word_approval(req.game_id, user_id, req.word, req.index)
	except GameStoreError as e:
		return game_error_response(e)
	return GameResponse(game=game)


@router.post("/api/resolve_word_request", response_model=GameResponse)
async def resolve_word_request(request: Request, req: ResolveWordRequestRequest, machine: GameStateMachine = Depends(get_state_machine)):
	user_id = _caller(request, req.user_id, session_only=True)
	try:
		await games_helpers.require_host(machine, req.game_id, user_id)
		game = await machine.resolve_word_request(req.game_id, req.request_id, req.approve)
	except GameStoreError as e:
		return game_error_response(e)
	return GameResponse(game=game)


# --- Read-side helpers ---
@router.get("/api/rankings", response_model=list[RankingEntry])
async def rankings(game_id: str, machine: GameStateMachine = Depends(get_state_machine)):
	game = await machine.get_game(game_id)
	if game is None:
		raise HTTPException(status_code=404, detail="Game not found")
	return [
		RankingEntry(
			rank=position,
			player_id=player.id,
			nickname=player.nickname,
			bingo_count=player.bingo_count,
			is_winner=player.is_winner,
		)
		for position, player in enumerate(rank_players(game), start=1)
	]


@router.get("/api/random_board")
async def random_board(game_id: str, machine: GameStateMachine = Depends(get_state_machine)):
	game = await machine.get_game(game_id)
	if game is None:
		raise HTTPException(status_code=404, detail="Game not found")
	return {"board": random_fill_board(game)}


@router.get("/api/feedback", response_model=FeedbackResponse)
async def feedback(game_id: str, machine: GameStateMachine = Depends(get_state_machine)):
	"""Latest feedback generated for this game, if any."""
	raw = await machine.store.get_raw(feedback_key(game_id))
	if not raw:
		return FeedbackResponse()
	try:
		data = json.loads(raw)
	except json.JSONDecodeError:
		logger.warning(f"Unreadable feedback record for {game_id}")
		return FeedbackResponse()
	return FeedbackResponse(player_id=data.get("player_id"), feedback=data.get("feedback"))
