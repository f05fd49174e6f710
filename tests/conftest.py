"""Shared fixtures: make the package importable and open throwaway databases."""

import sys
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lucky_pool.crud import CreateData  # noqa: E402
from lucky_pool.db import create_engine, create_session_factory  # noqa: E402

NOW = datetime(2023, 11, 14, 22, 13, 20)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def open_database(tmp_path):
    """Return an async context manager yielding ``(engine, Session)`` on a fresh sqlite file.

    Engines are bound to the event loop they are used in, so each test opens the
    database inside its own ``asyncio.run``.
    """
    url = f"sqlite+aiosqlite:///{tmp_path / 'lucky_pool.sqlite3'}"

    @asynccontextmanager
    async def _open():
        engine = create_engine(url)
        await CreateData.create_table(engine)
        try:
            yield engine, create_session_factory(engine)
        finally:
            await engine.dispose()

    return _open
