# Abstractions
from .game_store import GameStore

# Exceptions
from .exceptions import (
    BattleshipError,
    NotFound,
    InvalidState,
    InvalidInput,
    Unauthorized,
    Conflict,
    StoreError,
    GameNotFound,
    PlayerNotFound,
    OpponentNotFound,
    GameNotJoinable,
    CannotPlaceShips,
    GameNotInProgress,
    NotYourTurn,
    InvalidPlacement,
    InvalidCoordinate,
    InvalidName,
    InvalidToken,
    AlreadyFired,
    GameAlreadyExists,
    UnexpectedResult,
)

# Concrete implementations are private; only abstract interfaces are exported.
from .sqlite_game_store import SqliteGameStore as _SqliteGameStore

__all__ = [
    # Abstractions
    "GameStore",
    # Exceptions
    "BattleshipError",
    "NotFound",
    "InvalidState",
    "InvalidInput",
    "Unauthorized",
    "Conflict",
    "StoreError",
    "GameNotFound",
    "PlayerNotFound",
    "OpponentNotFound",
    "GameNotJoinable",
    "CannotPlaceShips",
    "GameNotInProgress",
    "NotYourTurn",
    "InvalidPlacement",
    "InvalidCoordinate",
    "InvalidName",
    "InvalidToken",
    "AlreadyFired",
    "GameAlreadyExists",
    "UnexpectedResult",
    # Runtime helpers
    "init_stores",
    "close_stores",
    "get_game_store",
]


# Runtime singletons and initialization helpers
from typing import Optional
import config

# Use the abstract interface for typing; the actual instance is a _SqliteGameStore
game_store: Optional[GameStore] = None


async def init_stores(db_path: str) -> GameStore:
    """Initialize the module-level store singleton for this process.

    Safe to call multiple times; initialization is idempotent.
    """
    global game_store

    if game_store is None:
        store = _SqliteGameStore(db_path)
        await store.init()
        game_store = store
    return game_store


async def close_stores() -> None:
    """Close and forget the store singleton (app shutdown, tests)."""
    global game_store
    if game_store is not None:
        await game_store.close()
        game_store = None


async def get_game_store() -> GameStore:
    """Get game store, initializing if needed (usable as a FastAPI dependency)."""
    if game_store is None:
        await init_stores(config.DB_PATH)
    if game_store is None:
        raise RuntimeError("Failed to initialize game store")
    return game_store
