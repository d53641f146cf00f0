"""Pydantic request/response models for the FastAPI endpoints and MCP tools.

Keep transport concerns (validation, docs, camelCase wire names) here and keep
business/domain types in `models.domain_models`. Field names are snake_case
in Python and serialized with camelCase aliases.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .domain_models import (
	Coordinate,
	FireResult,
	Game,
	GameState,
	OpponentView,
	Player,
	Ship,
	Shot,
)


class CamelModel(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests ---

class PlayerNameRequest(CamelModel):
	name: str = Field(min_length=1, max_length=200, description="Your player name")


class CoordinateModel(CamelModel):
	x: int
	y: int

	def to_domain(self) -> Coordinate:
		return Coordinate(self.x, self.y)


class ShipModel(CamelModel):
	name: str = Field(description="Carrier, Battleship, Cruiser, Submarine or Destroyer")
	size: int = Field(description="Ship size: 5, 4, 3, 3 or 2")
	positions: list[CoordinateModel]

	def to_domain(self) -> Ship:
		return Ship(self.name, self.size, tuple(p.to_domain() for p in self.positions))

	@classmethod
	def from_domain(cls, ship: Ship) -> "ShipModel":
		return cls(
			name=ship.name,
			size=ship.size,
			positions=[CoordinateModel(x=p.x, y=p.y) for p in ship.positions],
		)


class PlaceShipsRequest(CamelModel):
	ships: list[ShipModel]


class FireRequest(CoordinateModel):
	pass


# --- Responses ---

class ShotModel(CamelModel):
	x: int
	y: int
	hit: bool

	@classmethod
	def from_domain(cls, shot: Shot) -> "ShotModel":
		return cls(x=shot.x, y=shot.y, hit=shot.hit)


class JoinedGameResponse(CamelModel):
	game_code: str
	game_id: str
	player_token: str
	status: str

	@classmethod
	def from_domain(cls, game: Game, player: Player) -> "JoinedGameResponse":
		return cls(
			game_code=game.code,
			game_id=game.id,
			player_token=player.token,
			status=game.status.value,
		)


class PlaceShipsResponse(CamelModel):
	success: bool = True
	message: str
	game_started: bool


class FireResponse(CamelModel):
	hit: bool
	sunk: str | None = None
	game_over: bool
	winner: str | None = None
	message: str

	@classmethod
	def from_domain(cls, result: FireResult) -> "FireResponse":
		return cls(
			hit=result.hit,
			sunk=result.sunk,
			game_over=result.game_over,
			winner=result.winner.value if result.winner else None,
			message=result.message,
		)


class GameModel(CamelModel):
	id: str
	code: str
	status: str
	current_turn: str | None = None
	winner: str | None = None
	created_at: datetime

	@classmethod
	def from_domain(cls, game: Game) -> "GameModel":
		return cls(
			id=game.id,
			code=game.code,
			status=game.status.value,
			current_turn=game.current_turn.value if game.current_turn else None,
			winner=game.winner.value if game.winner else None,
			created_at=game.created_at,
		)


class YouModel(CamelModel):
	name: str
	slot: str
	board: list[ShipModel]
	shots: list[ShotModel]
	ready: bool


class OpponentModel(CamelModel):
	name: str
	shots: list[ShotModel]
	ready: bool
	ships_sunk: int

	@classmethod
	def from_domain(cls, view: OpponentView) -> "OpponentModel":
		return cls(
			name=view.name,
			shots=[ShotModel.from_domain(s) for s in view.shots],
			ready=view.ready,
			ships_sunk=view.ships_sunk,
		)


class GameStateResponse(CamelModel):
	game: GameModel
	you: YouModel
	opponent: OpponentModel | None = None
	is_your_turn: bool

	@classmethod
	def from_domain(cls, state: GameState) -> "GameStateResponse":
		you = state.you
		return cls(
			game=GameModel.from_domain(state.game),
			you=YouModel(
				name=you.name,
				slot=you.slot.value,
				board=[ShipModel.from_domain(s) for s in you.board],
				shots=[ShotModel.from_domain(s) for s in you.shots],
				ready=you.ready,
			),
			opponent=OpponentModel.from_domain(state.opponent) if state.opponent else None,
			is_your_turn=state.is_your_turn,
		)


__all__ = [
	"CamelModel",
	"PlayerNameRequest",
	"CoordinateModel",
	"ShipModel",
	"PlaceShipsRequest",
	"FireRequest",
	"ShotModel",
	"JoinedGameResponse",
	"PlaceShipsResponse",
	"FireResponse",
	"GameModel",
	"YouModel",
	"OpponentModel",
	"GameStateResponse",
]
