from fastapi import APIRouter, Depends
import logging

from models import (
	PlayerNameRequest,
	PlaceShipsRequest,
	FireRequest,
	JoinedGameResponse,
	PlaceShipsResponse,
	FireResponse,
	GameStateResponse,
)
from services import game_service
from stores import get_game_store, BattleshipError
from utils.tokens import require_player_token
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201, response_model=JoinedGameResponse)
async def create_game(req: PlayerNameRequest, store = Depends(get_game_store)):
	try:
		game, player = await game_service.create_game(store, req.name)
	except BattleshipError as exc:
		raise to_http_exception(exc, "create game") from exc
	return JoinedGameResponse.from_domain(game, player)


@router.post("/{code}/join", response_model=JoinedGameResponse)
async def join_game(code: str, req: PlayerNameRequest, store = Depends(get_game_store)):
	try:
		game, player = await game_service.join_game(store, code, req.name)
	except BattleshipError as exc:
		raise to_http_exception(exc, f"join game {code}") from exc
	return JoinedGameResponse.from_domain(game, player)


@router.get("/{code}", response_model=GameStateResponse)
async def get_game_state(code: str, token: str = Depends(require_player_token), store = Depends(get_game_store)):
	try:
		await game_service.authorize(store, token, code)
		state = await game_service.get_game_state(store, token)
	except BattleshipError as exc:
		raise to_http_exception(exc, f"read game {code}") from exc
	return GameStateResponse.from_domain(state)


@router.post("/{code}/place-ships", response_model=PlaceShipsResponse)
async def place_ships(code: str, req: PlaceShipsRequest, token: str = Depends(require_player_token), store = Depends(get_game_store)):
	try:
		await game_service.authorize(store, token, code)
		started = await game_service.place_ships(store, token, [s.to_domain() for s in req.ships])
	except BattleshipError as exc:
		raise to_http_exception(exc, f"place ships in game {code}") from exc

	message = "Ships placed successfully. The game has started." if started else \
		"Ships placed successfully. Waiting for opponent to place ships."
	return PlaceShipsResponse(message=message, game_started=started)


@router.post("/{code}/fire", response_model=FireResponse)
async def fire(code: str, req: FireRequest, token: str = Depends(require_player_token), store = Depends(get_game_store)):
	try:
		await game_service.authorize(store, token, code)
		result = await game_service.fire(store, token, req.to_domain())
	except BattleshipError as exc:
		raise to_http_exception(exc, f"fire in game {code}") from exc
	return FireResponse.from_domain(result)
