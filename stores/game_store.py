from typing import AsyncContextManager, Optional
from abc import ABC, abstractmethod

from models.domain_models import Game, Player, Slot


# =========================
# GameStore Interface
# =========================

class GameStore(ABC):
    """
    The GameStore is the sole source of truth for games and players between requests.

    Invariants:
    - Work done inside `atomic()` is applied entirely or not at all
    - `atomic()` units never interleave with each other, so a read-modify-write
      of a game (fire, place ships) cannot race another one on the same game
    - Game codes and player tokens are unique
    - A game has at most two players, one per slot

    Storage failures surface as `StoreError` (see stores.exceptions).
    """

    # -------------------------------------------------
    # Lifecycle
    # -------------------------------------------------

    @abstractmethod
    async def init(self) -> None:
        """Open connections / create schema. Call this after construction."""

    @abstractmethod
    async def close(self) -> None:
        """Release connections."""

    @abstractmethod
    def atomic(self) -> AsyncContextManager[None]:
        """Return an async context manager wrapping one unit of work.

        Commits on normal exit, rolls back if the block raises.
        """

    # -------------------------------------------------
    # Games
    # -------------------------------------------------

    @abstractmethod
    async def create_game(self, code: str) -> Game:
        """Create a game in `waiting` status.

        Raises:
            GameAlreadyExists: If a game with this code already exists.
        """

    @abstractmethod
    async def get_game_by_code(self, code: str) -> Optional[Game]:
        """Return the game with this code, or None."""

    @abstractmethod
    async def get_game_by_id(self, game_id: str) -> Optional[Game]:
        """Return the game with this id, or None."""

    @abstractmethod
    async def update_game(self, game_id: str, **fields) -> None:
        """Update `status`, `current_turn` and/or `winner` of a game.

        Raises:
            GameNotFound: If the game does not exist.
            ValueError: If an unknown field is passed.
        """

    # -------------------------------------------------
    # Players
    # -------------------------------------------------

    @abstractmethod
    async def create_player(self, game_id: str, slot: Slot, name: str) -> Player:
        """Create a player in `slot` of a game with a fresh, unguessable token.

        Raises:
            GameNotFound: If the game does not exist.
            UnexpectedResult: If the slot is already taken.
        """

    @abstractmethod
    async def get_player_by_token(self, token: str) -> Optional[Player]:
        """Return the player holding this token, or None."""

    @abstractmethod
    async def get_players_by_game(self, game_id: str) -> list[Player]:
        """Return the 0 to 2 players of a game, player1 first."""

    @abstractmethod
    async def update_player(self, player_id: str, **fields) -> None:
        """Update `board`, `shots` and/or `ready` of a player.

        Raises:
            PlayerNotFound: If the player does not exist.
            ValueError: If an unknown field is passed.
        """

    # -------------------------------------------------
    # Maintenance
    # -------------------------------------------------

    @abstractmethod
    async def delete_stale_games(self, inactivity_days: int = 7) -> int:
        """
        Delete all games (and their players) created more than
        `inactivity_days` days ago. Returns the number of games deleted.
        """
