import os
from pathlib import Path


def _bool_env(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# Path to the SQLite database file used by stores. Can be overridden
# using the BATTLESHIP_DB_PATH environment variable.
DB_PATH = os.environ.get("BATTLESHIP_DB_PATH", str(Path(__file__).parent / "db.sqlite3"))

CORS_ORIGINS = [o.strip() for o in os.environ.get("BATTLESHIP_CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.environ.get("BATTLESHIP_LOG_LEVEL", "INFO").upper()

PORT = int(os.environ.get("PORT", "3000"))

# Nightly cleanup of abandoned games
CLEANUP_ENABLED = _bool_env("BATTLESHIP_CLEANUP_ENABLED", True)
CLEANUP_HOUR = int(os.environ.get("BATTLESHIP_CLEANUP_HOUR", "0"))
TIMEZONE = os.environ.get("BATTLESHIP_TIMEZONE", "UTC")
STALE_GAME_DAYS = int(os.environ.get("BATTLESHIP_STALE_GAME_DAYS", "7"))

MCP_HOST = os.environ.get("BATTLESHIP_MCP_HOST", "0.0.0.0")
MCP_PORT = int(os.environ.get("BATTLESHIP_MCP_PORT", os.environ.get("MCP_PORT", "3001")))
