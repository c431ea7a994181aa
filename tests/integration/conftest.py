"""Database fixtures for repository integration tests.

Uses a throwaway SQLite file per test (aiosqlite). Set TEST_DATABASE_URL
to run against another async URL (e.g. postgresql+asyncpg://...); tables
are dropped after each test.
"""

import os

import pytest

from automation.infrastructure.persistence.database import Base, build_session_factory, create_all


@pytest.fixture
async def session_factory(tmp_path):
    url = os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'automation.db'}"
    engine, factory = build_session_factory(url)
    await create_all(engine)
    yield factory
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
