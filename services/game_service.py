"""
Game lifecycle and turn arbitration.

These functions encapsulate game operations and can be called from:
- HTTP routes (routes/games.py)
- MCP tools (mcp_server.py)

They operate on domain records and a GameStore, not on HTTP requests. Every
operation runs inside `store.atomic()`: all checks happen before the first
write, and any failure rolls the whole unit back.

Lifecycle: waiting -> placing -> playing -> finished (terminal).
"""

import logging
import secrets
from dataclasses import replace
from typing import Sequence

from models.domain_models import (
    Coordinate,
    FireResult,
    Game,
    GameState,
    GameStatus,
    OpponentView,
    Player,
    Ship,
    Shot,
    Slot,
)
from stores import (
    GameStore,
    AlreadyFired,
    CannotPlaceShips,
    GameAlreadyExists,
    GameNotFound,
    GameNotInProgress,
    GameNotJoinable,
    InvalidCoordinate,
    InvalidName,
    InvalidPlacement,
    InvalidToken,
    NotYourTurn,
    OpponentNotFound,
    UnexpectedResult,
)
from utils.validation import (
    GAME_CODE_ALPHABET,
    GAME_CODE_LENGTH,
    is_valid_name,
    normalize_code,
)
from . import rules

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 10


def generate_game_code() -> str:
    return "".join(secrets.choice(GAME_CODE_ALPHABET) for _ in range(GAME_CODE_LENGTH))


def _clean_name(name: str) -> str:
    if not is_valid_name(name or ""):
        raise InvalidName(
            "Player name is required (letters, numbers, spaces and .'-_`’· only, up to 50 characters)"
        )
    return name.strip()


async def _resolve_player(store: GameStore, token: str) -> Player:
    player = await store.get_player_by_token(token) if token else None
    if player is None:
        raise InvalidToken("Invalid player token")
    return player


async def _load_game(store: GameStore, player: Player) -> Game:
    game = await store.get_game_by_id(player.game_id)
    if game is None:
        raise GameNotFound("Game not found")
    return game


def _opponent_of(player: Player, players: Sequence[Player]) -> Player | None:
    return next((p for p in players if p.id != player.id), None)


# -------------------------------------------------
# Lifecycle
# -------------------------------------------------

async def create_game(store: GameStore, name: str) -> tuple[Game, Player]:
    """
    Create a new game in `waiting` status with the caller as player1.

    Raises:
        InvalidName: if the player name is empty or malformed
        UnexpectedResult: if no free game code was found
    """
    name = _clean_name(name)

    async with store.atomic():
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_game_code()
            try:
                game = await store.create_game(code)
                break
            except GameAlreadyExists:
                logger.info(f"Game code {code} collided, retrying")
        else:
            raise UnexpectedResult(f"Could not allocate a game code after {MAX_CODE_ATTEMPTS} attempts")

        player = await store.create_player(game.id, Slot.PLAYER1, name)

    logger.info(f"Game {game.code} created by {name}")
    return game, player


async def join_game(store: GameStore, code: str, name: str) -> tuple[Game, Player]:
    """
    Join a waiting game as player2 and move it to `placing`.

    Raises:
        InvalidName: if the player name is empty or malformed
        GameNotFound: if no game has this code
        GameNotJoinable: if the game is no longer waiting for a second player
    """
    name = _clean_name(name)
    code = normalize_code(code)

    async with store.atomic():
        game = await store.get_game_by_code(code)
        if game is None:
            raise GameNotFound("Game not found")
        if game.status is not GameStatus.WAITING:
            raise GameNotJoinable("Game is not available to join")

        player = await store.create_player(game.id, Slot.PLAYER2, name)
        await store.update_game(game.id, status=GameStatus.PLACING)

    logger.info(f"{name} joined game {game.code}")
    return replace(game, status=GameStatus.PLACING), player


# -------------------------------------------------
# Placement
# -------------------------------------------------

async def place_ships(store: GameStore, token: str, ships: Sequence[Ship]) -> bool:
    """
    Store the caller's fleet and mark them ready.

    When both fleets are in place the game moves to `playing` with player1
    to move. Returns True if this call started the game.

    Raises:
        InvalidToken: if no player holds `token`
        GameNotFound: if the player's game is gone
        CannotPlaceShips: if the game is not in `placing` or the fleet is already placed
        InvalidPlacement: if the fleet breaks a placement rule
    """
    async with store.atomic():
        player = await _resolve_player(store, token)
        game = await _load_game(store, player)

        if game.status is not GameStatus.PLACING:
            raise CannotPlaceShips("Cannot place ships at this time")
        if player.ready:
            raise CannotPlaceShips("Ships have already been placed")

        result = rules.validate_placement(ships)
        if not result.valid:
            raise InvalidPlacement(result.error)

        await store.update_player(player.id, board=tuple(ships), ready=True)

        # Decide on the committed rows, not on what this call assumes
        players = await store.get_players_by_game(game.id)
        started = len(players) == 2 and all(p.ready for p in players)
        if started:
            await store.update_game(game.id, status=GameStatus.PLAYING, current_turn=Slot.PLAYER1)

    logger.info(f"{player.slot.value} placed ships in game {game.code}")
    if started:
        logger.info(f"Game {game.code} started")
    return started


# -------------------------------------------------
# Firing
# -------------------------------------------------

async def fire(store: GameStore, token: str, target: Coordinate) -> FireResult:
    """
    Fire one shot at the opponent's board.

    A winning shot finishes the game and leaves the turn where it is; any
    other shot passes the turn to the opponent.

    Raises:
        InvalidToken: if no player holds `token`
        InvalidCoordinate: if `target` is off the board
        GameNotFound: if the player's game is gone
        GameNotInProgress: if the game is not in `playing`
        NotYourTurn: if the opponent is to move
        AlreadyFired: if the player already fired at `target`
        OpponentNotFound: if the game has no second player
    """
    async with store.atomic():
        player = await _resolve_player(store, token)
        if not rules.is_valid_coordinate(target):
            raise InvalidCoordinate(f"Invalid coordinates: ({target.x}, {target.y})")

        game = await _load_game(store, player)
        if game.status is not GameStatus.PLAYING:
            raise GameNotInProgress("Game is not in playing state")
        if game.current_turn is not player.slot:
            raise NotYourTurn("Not your turn")
        if player.has_fired_at(target):
            raise AlreadyFired(f"Already fired at this position: ({target.x}, {target.y})")

        opponent = _opponent_of(player, await store.get_players_by_game(game.id))
        if opponent is None:
            raise OpponentNotFound("Opponent not found")

        shot = Shot(target.x, target.y, rules.is_hit(opponent.board, target))
        shots = player.shots + (shot,)
        outcome = rules.resolve_shot(opponent.board, shots, target)

        await store.update_player(player.id, shots=shots)
        if outcome.game_over:
            await store.update_game(game.id, status=GameStatus.FINISHED, winner=player.slot)
        else:
            await store.update_game(game.id, current_turn=player.slot.other)

    winner = player.slot if outcome.game_over else None
    if winner:
        logger.info(f"Game {game.code} won by {winner.value}")
    return FireResult(
        hit=outcome.hit,
        sunk=outcome.sunk,
        game_over=outcome.game_over,
        winner=winner,
        message=rules.describe_shot(outcome),
    )


# -------------------------------------------------
# Read side
# -------------------------------------------------

async def authorize(store: GameStore, token: str, code: str) -> Player:
    """
    Resolve `token` and check it belongs to the game with `code`.

    Raises:
        InvalidToken: if no player holds `token`
        GameNotFound: if the token's game does not have this code
    """
    async with store.atomic():
        player = await _resolve_player(store, token)
        game = await store.get_game_by_id(player.game_id)
    if game is None or game.code != normalize_code(code):
        raise GameNotFound("Game not found")
    return player


async def get_game_state(store: GameStore, token: str) -> GameState:
    """
    Return the caller's view of the game.

    The opponent is reduced to name, shots, readiness and a sunk-ship count;
    their ship positions never leave this function.

    Raises:
        InvalidToken: if no player holds `token`
        GameNotFound: if the player's game is gone
    """
    async with store.atomic():
        player = await _resolve_player(store, token)
        game = await _load_game(store, player)
        opponent = _opponent_of(player, await store.get_players_by_game(game.id))

    view = None
    if opponent is not None:
        view = OpponentView(
            name=opponent.name,
            shots=opponent.shots,
            ready=opponent.ready,
            ships_sunk=rules.count_sunk_ships(opponent.board, player.shots),
        )
    return GameState(
        game=game,
        you=player,
        opponent=view,
        is_your_turn=game.status is GameStatus.PLAYING and game.current_turn is player.slot,
    )
