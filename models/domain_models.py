"""Domain-level records used by the rules engine, the service layer and stores.

Records are frozen dataclasses so nothing downstream can mutate a game or a
player behind the store's back; changes go through `dataclasses.replace` and
an explicit store update. `to_dict`/`from_dict` map directly to the JSON
stored in the database.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class GameStatus(str, Enum):
	WAITING = "waiting"
	PLACING = "placing"
	PLAYING = "playing"
	FINISHED = "finished"


class Slot(str, Enum):
	PLAYER1 = "player1"
	PLAYER2 = "player2"

	@property
	def other(self) -> "Slot":
		return Slot.PLAYER2 if self is Slot.PLAYER1 else Slot.PLAYER1


@dataclass(frozen=True)
class Coordinate:
	x: int
	y: int

	def to_dict(self) -> dict[str, int]:
		return {"x": self.x, "y": self.y}

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> "Coordinate":
		return cls(x=int(data["x"]), y=int(data["y"]))


@dataclass(frozen=True)
class Ship:
	name: str
	size: int
	positions: tuple[Coordinate, ...] = ()

	def covers(self, target: Coordinate) -> bool:
		return target in self.positions

	def to_dict(self) -> dict[str, Any]:
		return {
			"name": self.name,
			"size": self.size,
			"positions": [p.to_dict() for p in self.positions],
		}

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> "Ship":
		return cls(
			name=data["name"],
			size=int(data["size"]),
			positions=tuple(Coordinate.from_dict(p) for p in data.get("positions", [])),
		)


@dataclass(frozen=True)
class Shot:
	x: int
	y: int
	hit: bool

	@property
	def coordinate(self) -> Coordinate:
		return Coordinate(self.x, self.y)

	def to_dict(self) -> dict[str, Any]:
		return {"x": self.x, "y": self.y, "hit": self.hit}

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> "Shot":
		return cls(x=int(data["x"]), y=int(data["y"]), hit=bool(data["hit"]))


@dataclass(frozen=True)
class Game:
	id: str
	code: str
	status: GameStatus
	current_turn: Slot | None
	winner: Slot | None
	created_at: datetime

	def to_dict(self) -> dict[str, Any]:
		return {
			"id": self.id,
			"code": self.code,
			"status": self.status.value,
			"current_turn": self.current_turn.value if self.current_turn else None,
			"winner": self.winner.value if self.winner else None,
			"created_at": self.created_at.isoformat(),
		}


@dataclass(frozen=True)
class Player:
	id: str
	game_id: str
	slot: Slot
	name: str
	token: str
	board: tuple[Ship, ...] = ()
	shots: tuple[Shot, ...] = ()
	ready: bool = False

	def has_fired_at(self, target: Coordinate) -> bool:
		return any(s.x == target.x and s.y == target.y for s in self.shots)


@dataclass(frozen=True)
class OpponentView:
	"""What a player may see of the other side: never ship positions."""
	name: str
	shots: tuple[Shot, ...]
	ready: bool
	ships_sunk: int


@dataclass(frozen=True)
class GameState:
	game: Game
	you: Player
	opponent: OpponentView | None
	is_your_turn: bool


@dataclass(frozen=True)
class FireResult:
	hit: bool
	sunk: str | None
	game_over: bool
	winner: Slot | None
	message: str = field(default="", compare=False)


__all__ = [
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
