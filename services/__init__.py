"""Services package: the Battleship rules engine and the game state machine.

Import submodules to make them available as `services.rules` and
`services.game_service`.
"""

from . import rules, game_service

from .rules import (
	BOARD_SIZE,
	SHIPS,
	validate_placement,
	resolve_shot,
)
from .game_service import (
	create_game,
	join_game,
	place_ships,
	fire,
	get_game_state,
)

__all__ = [
	"rules",
	"game_service",
	"BOARD_SIZE",
	"SHIPS",
	"validate_placement",
	"resolve_shot",
	"create_game",
	"join_game",
	"place_ships",
	"fire",
	"get_game_state",
]
