"""Utility helpers used across the project.

Make commonly used helpers available at the package level for convenience.

Exports:
- token helpers: `get_player_token`, `require_player_token`
- time helpers: `now_utc`, `to_iso`, `parse_iso`
- validation helpers: `is_valid_name`, `normalize_code`, `is_valid_code`, `VALID_NAME_RE`
"""

from .tokens import get_player_token, require_player_token, PLAYER_TOKEN_HEADER
from .time import now_utc, to_iso, parse_iso
from .validation import (
	is_valid_name,
	normalize_code,
	is_valid_code,
	VALID_NAME_RE,
	GAME_CODE_ALPHABET,
	GAME_CODE_LENGTH,
)

__all__ = [
	"get_player_token",
	"require_player_token",
	"PLAYER_TOKEN_HEADER",
	"now_utc",
	"to_iso",
	"parse_iso",
	"is_valid_name",
	"normalize_code",
	"is_valid_code",
	"VALID_NAME_RE",
	"GAME_CODE_ALPHABET",
	"GAME_CODE_LENGTH",
]
