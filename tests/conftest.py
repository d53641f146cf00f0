import asyncio
import logging

import pytest

from stores.sqlite_game_store import SqliteGameStore

# Suppress INFO & DEBUG logs from the service during tests
logging.basicConfig(level=logging.WARNING)


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "battleship.sqlite3")


@pytest.fixture
def run_with_store(db_path):
    """Run `scenario(store)` on a fresh event loop against a temporary database."""

    def _run(scenario):
        async def _main():
            store = SqliteGameStore(db_path)
            await store.init()
            try:
                return await scenario(store)
            finally:
                await store.close()

        return asyncio.run(_main())

    return _run
