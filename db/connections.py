from pathlib import Path
from typing import Dict, Optional
import aiosqlite


SCHEMA_PATH = Path(__file__).parent / "schema.sql"


async def connect(db_path: str, pragmas: Optional[Dict[str, str]] = None) -> aiosqlite.Connection:
    """Open an aiosqlite connection for the game store.

    - Autocommit mode (`isolation_level=None`); callers open transactions
      explicitly with `BEGIN IMMEDIATE`.
    - Sets `row_factory` to `aiosqlite.Row` for named access.
    - Enables foreign keys so deleting a game removes its players.
    - Applies any additional PRAGMA settings supplied in `pragmas`.

    Returns an open connection; caller is responsible for closing it.
    """
    conn = await aiosqlite.connect(db_path, timeout=30.0, isolation_level=None)
    conn.row_factory = aiosqlite.Row

    await conn.execute("PRAGMA foreign_keys = ON")
    if pragmas:
        for k, v in pragmas.items():
            await conn.execute(f"PRAGMA {k} = {v}")
    return conn


async def init_db(db_path: str, schema_path: Optional[str] = None) -> None:
    """Apply the SQL schema to a SQLite database file.

    If `schema_path` is not provided the bundled `db/schema.sql` is used.
    The schema only uses `IF NOT EXISTS` statements, so this is idempotent.
    """
    schema_file = Path(schema_path) if schema_path else SCHEMA_PATH
    if not schema_file.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_file}")

    conn = await connect(db_path)
    try:
        await conn.executescript(schema_file.read_text())
    finally:
        await conn.close()


async def ensure_db(db_path: str, schema_path: Optional[str] = None) -> None:
    """Make sure the database file and its tables exist."""
    db_file = Path(db_path)
    if db_file.parent and not db_file.parent.exists():
        db_file.parent.mkdir(parents=True, exist_ok=True)

    await init_db(db_path, schema_path)
