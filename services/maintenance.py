"""Periodic housekeeping jobs run by the app scheduler."""

import logging
from typing import Any, Dict

import config
from stores import StoreError, get_game_store

logger = logging.getLogger(__name__)


async def delete_stale_games(inactivity_days: int | None = None) -> Dict[str, Any]:
    """Delete games older than `inactivity_days` (default from config).

    Storage failures are logged and reported in the result; the next scheduled
    run retries.
    """
    days = config.STALE_GAME_DAYS if inactivity_days is None else inactivity_days
    logger.info(f"Starting delete_stale_games (inactivity_days={days})")

    store = await get_game_store()
    try:
        deleted_count = await store.delete_stale_games(days)
    except StoreError as exc:
        logger.error(f"delete_stale_games failed: {exc}", exc_info=True)
        return {"status": "failure", "error": exc.__class__.__name__, "message": str(exc)}

    return {"status": "success", "deleted_count": deleted_count, "inactivity_days": days}
