"""Map game/store exceptions to HTTP errors.

Expected rejections (bad input, wrong state, unknown token) are logged at
info level; storage failures are logged as errors with the traceback.
"""
import logging
from fastapi import HTTPException

from stores import (
	BattleshipError,
	NotFound,
	InvalidState,
	InvalidInput,
	Unauthorized,
	Conflict,
	StoreError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: list[tuple[type[BattleshipError], int]] = [
	(Unauthorized, 401),
	(NotFound, 404),
	(Conflict, 409),
	(InvalidInput, 400),
	(InvalidState, 400),
	(StoreError, 500),
]


def status_for(exc: BattleshipError) -> int:
	for cls, status in STATUS_CODES:
		if isinstance(exc, cls):
			return status
	return 500


def to_http_exception(exc: BattleshipError, action: str) -> HTTPException:
	status = status_for(exc)
	if status >= 500:
		logger.error(f"Failed to {action}: {exc.__class__.__name__}: {exc}", exc_info=exc)
		return HTTPException(status_code=status, detail=f"Server error: {exc}")

	logger.info(f"Rejected {action}: {exc.__class__.__name__}: {exc}")
	return HTTPException(status_code=status, detail=str(exc))
