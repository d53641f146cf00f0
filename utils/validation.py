"""Validation and normalization helpers for user-supplied strings.

Used by the service layer before anything is written to the store.
"""
import regex as re


# Allow: any Unicode letter/mark/number, spaces, plus a small, explicit set of name punctuation
VALID_NAME_RE = re.compile(r"^[\p{L}\p{M}\p{N} .'\-_`’·]+$", flags=re.UNICODE)

MAX_NAME_LENGTH = 50

# Game codes never use I, O, 0 or 1
GAME_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
GAME_CODE_LENGTH = 6
GAME_CODE_RE = re.compile(rf"^[{GAME_CODE_ALPHABET}]{{{GAME_CODE_LENGTH}}}$")


def is_valid_name(s: str) -> bool:
	"""Return True if `s` is a reasonable player name.

	- Strips and enforces a sensible maximum length.
	- Uses Unicode-aware character class matching.
	"""
	if not s or s.isspace():
		return False
	s = s.strip()
	if len(s) > MAX_NAME_LENGTH:
		return False
	return bool(VALID_NAME_RE.match(s))


def normalize_code(code: str) -> str:
	"""Game codes are case-insensitive on input and stored upper-case."""
	return (code or "").strip().upper()


def is_valid_code(code: str) -> bool:
	return bool(GAME_CODE_RE.match(code))
