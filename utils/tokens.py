"""Player token helpers for FastAPI request handling.

A player token is an opaque capability: whoever presents it acts as that
player. Clients send it either as `X-Player-Token: <token>` or as
`Authorization: Bearer <token>`.
"""
from typing import Optional
from fastapi import HTTPException, Request


PLAYER_TOKEN_HEADER = "X-Player-Token"


def get_player_token(request: Request) -> Optional[str]:
	"""Return the player token from the request headers, or `None` if missing."""
	token = request.headers.get(PLAYER_TOKEN_HEADER)
	if token and token.strip():
		return token.strip()

	authorization = request.headers.get("Authorization", "")
	scheme, _, credentials = authorization.partition(" ")
	if scheme.lower() == "bearer" and credentials.strip():
		return credentials.strip()
	return None


def require_player_token(request: Request) -> str:
	"""FastAPI dependency: the caller's player token, or 401 if none was sent."""
	token = get_player_token(request)
	if token is None:
		raise HTTPException(status_code=401, detail="Player token required")
	return token
