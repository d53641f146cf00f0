"""Data models used by the application.

Split into:
- `api_models`: Pydantic models used for request/response validation
- `domain_models`: frozen domain records used in business logic and stores

Import submodules to make them available as `models.api_models`.
"""

from . import api_models, domain_models

# Re-export selected API models (Pydantic models used for request/response)
from .api_models import (
	PlayerNameRequest,
	CoordinateModel,
	ShipModel,
	PlaceShipsRequest,
	FireRequest,
	JoinedGameResponse,
	PlaceShipsResponse,
	FireResponse,
	GameStateResponse,
)

# Re-export domain records
from .domain_models import (
	GameStatus,
	Slot,
	Coordinate,
	Ship,
	Shot,
	Game,
	Player,
	OpponentView,
	GameState,
	FireResult,
)

__all__ = [
	# submodules
	"api_models",
	"domain_models",
	# api models
	"PlayerNameRequest",
	"CoordinateModel",
	"ShipModel",
	"PlaceShipsRequest",
	"FireRequest",
	"JoinedGameResponse",
	"PlaceShipsResponse",
	"FireResponse",
	"GameStateResponse",
	# domain models
	"GameStatus",
	"Slot",
	"Coordinate",
	"Ship",
	"Shot",
	"Game",
	"Player",
	"OpponentView",
	"GameState",
	"FireResult",
]
