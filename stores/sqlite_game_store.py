import asyncio
import json
import secrets
import sqlite3
import uuid
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator, Optional
import logging

import aiosqlite

from db import connect, ensure_db
from models.domain_models import Game, GameStatus, Player, Ship, Shot, Slot
from utils.time import now_utc, parse_iso, to_iso
from .exceptions import (
    GameAlreadyExists,
    GameNotFound,
    PlayerNotFound,
    StoreError,
    UnexpectedResult,
)
from .game_store import GameStore

logger = logging.getLogger(__name__)

_GAME_FIELDS = {"status", "current_turn", "winner"}
_PLAYER_FIELDS = {"board", "shots", "ready"}


def _game_from_row(row) -> Game:
    return Game(
        id=row["game_id"],
        code=row["code"],
        status=GameStatus(row["status"]),
        current_turn=Slot(row["current_turn"]) if row["current_turn"] else None,
        winner=Slot(row["winner"]) if row["winner"] else None,
        created_at=parse_iso(row["created_at"]),
    )


def _player_from_row(row) -> Player:
    return Player(
        id=row["player_id"],
        game_id=row["game_id"],
        slot=Slot(row["player_number"]),
        name=row["name"],
        token=row["token"],
        board=tuple(Ship.from_dict(s) for s in json.loads(row["board"])),
        shots=tuple(Shot.from_dict(s) for s in json.loads(row["shots"])),
        ready=bool(row["ready"]),
    )


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


class SqliteGameStore(GameStore):
    """SQLite-based implementation of GameStore.

    One connection per store. `atomic()` holds an asyncio lock for the whole
    unit and wraps it in BEGIN IMMEDIATE, so units are serialized both inside
    this process and against other processes sharing the file. `atomic()` is
    not reentrant.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.db: aiosqlite.Connection = None
        self._lock = asyncio.Lock()
        logger.info(f"[STORE] SqliteGameStore initialized with db_path: {db_path}")

    async def init(self):
        """Create the schema if needed and open the connection."""
        try:
            await ensure_db(self.db_path)
            # DELETE journal mode avoids WAL locking problems on mounted volumes
            self.db = await connect(self.db_path, {"journal_mode": "DELETE"})
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to open database at {self.db_path}: {exc}") from exc
        logger.info(f"[STORE] Database connection established to {self.db_path}")

    async def close(self):
        """Close database connection."""
        if self.db:
            await self.db.close()
            self.db = None

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        async with self._lock:
            await self._execute("BEGIN IMMEDIATE", action="begin transaction")
            try:
                yield
            except BaseException:
                await self.db.rollback()
                raise
            try:
                await self.db.commit()
            except sqlite3.Error as exc:
                await self.db.rollback()
                raise StoreError(f"Failed to commit transaction: {exc}") from exc

    async def _execute(self, sql: str, params: tuple = (), *, action: str) -> aiosqlite.Cursor:
        try:
            return await self.db.execute(sql, params)
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to {action}: {exc}") from exc

    async def _fetchone(self, sql: str, params: tuple = (), *, action: str):
        cur = await self._execute(sql, params, action=action)
        try:
            return await cur.fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to {action}: {exc}") from exc

    async def _fetchall(self, sql: str, params: tuple = (), *, action: str):
        cur = await self._execute(sql, params, action=action)
        try:
            return await cur.fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to {action}: {exc}") from exc

    # -------------------------------------------------
    # Games
    # -------------------------------------------------

    async def create_game(self, code: str) -> Game:
        # Raises: GameAlreadyExists
        game = Game(
            id=str(uuid.uuid4()),
            code=code,
            status=GameStatus.WAITING,
            current_turn=None,
            winner=None,
            created_at=now_utc(),
        )
        try:
            await self.db.execute(
                """
                INSERT INTO games (game_id, code, status, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (game.id, game.code, game.status.value, to_iso(game.created_at)),
            )
        except sqlite3.IntegrityError as exc:
            raise GameAlreadyExists(f"Game code {code} is already in use") from exc
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to create game: {exc}") from exc

        logger.info(f"[STORE] Created game {game.id} with code {code}")
        return game

    async def get_game_by_code(self, code: str) -> Optional[Game]:
        row = await self._fetchone(
            "SELECT * FROM games WHERE code = ?", (code,), action="load game by code"
        )
        return _game_from_row(row) if row else None

    async def get_game_by_id(self, game_id: str) -> Optional[Game]:
        row = await self._fetchone(
            "SELECT * FROM games WHERE game_id = ?", (game_id,), action="load game"
        )
        return _game_from_row(row) if row else None

    async def update_game(self, game_id: str, **fields) -> None:
        # Raises: GameNotFound
        unknown = set(fields) - _GAME_FIELDS
        if unknown:
            raise ValueError(f"Cannot update game fields: {sorted(unknown)}")
        if not fields:
            return

        columns = ", ".join(f"{k} = ?" for k in fields)
        values = tuple(_enum_value(v) for v in fields.values())
        cur = await self._execute(
            f"UPDATE games SET {columns} WHERE game_id = ?",
            values + (game_id,),
            action="update game",
        )
        if cur.rowcount == 0:
            raise GameNotFound(f"Game {game_id} not found")

    # -------------------------------------------------
    # Players
    # -------------------------------------------------

    async def create_player(self, game_id: str, slot: Slot, name: str) -> Player:
        # Raises: GameNotFound, UnexpectedResult
        if await self.get_game_by_id(game_id) is None:
            raise GameNotFound(f"Game {game_id} not found")

        player = Player(
            id=str(uuid.uuid4()),
            game_id=game_id,
            slot=slot,
            name=name,
            token=secrets.token_urlsafe(32),
        )
        try:
            await self.db.execute(
                """
                INSERT INTO players (player_id, game_id, player_number, name, token)
                VALUES (?, ?, ?, ?, ?)
                """,
                (player.id, game_id, slot.value, name, player.token),
            )
        except sqlite3.IntegrityError as exc:
            raise UnexpectedResult(f"Slot {slot.value} of game {game_id} is already taken") from exc
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to create player: {exc}") from exc
        return player

    async def get_player_by_token(self, token: str) -> Optional[Player]:
        row = await self._fetchone(
            "SELECT * FROM players WHERE token = ?", (token,), action="load player by token"
        )
        return _player_from_row(row) if row else None

    async def get_players_by_game(self, game_id: str) -> list[Player]:
        rows = await self._fetchall(
            "SELECT * FROM players WHERE game_id = ? ORDER BY player_number",
            (game_id,),
            action="load players",
        )
        return [_player_from_row(r) for r in rows]

    async def update_player(self, player_id: str, **fields) -> None:
        # Raises: PlayerNotFound
        unknown = set(fields) - _PLAYER_FIELDS
        if unknown:
            raise ValueError(f"Cannot update player fields: {sorted(unknown)}")
        if not fields:
            return

        values = []
        for key, value in fields.items():
            if key == "ready":
                values.append(int(bool(value)))
            else:
                values.append(json.dumps([item.to_dict() for item in value]))

        columns = ", ".join(f"{k} = ?" for k in fields)
        cur = await self._execute(
            f"UPDATE players SET {columns} WHERE player_id = ?",
            tuple(values) + (player_id,),
            action="update player",
        )
        if cur.rowcount == 0:
            raise PlayerNotFound(f"Player {player_id} not found")

    # -------------------------------------------------
    # Maintenance
    # -------------------------------------------------

    async def delete_stale_games(self, inactivity_days: int = 7) -> int:
        # Raises: None (StoreError on storage failure)
        cutoff = to_iso(now_utc() - timedelta(days=inactivity_days))
        async with self.atomic():
            cur = await self._execute(
                "DELETE FROM games WHERE created_at < ?",
                (cutoff,),
                action="delete stale games",
            )
            deleted_count = cur.rowcount
        logger.info(f"[STORE] Deleted {deleted_count} games older than {inactivity_days} days")
        return deleted_count
