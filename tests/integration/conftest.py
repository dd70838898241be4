"""Integration-test fixtures.

These tests need a live PostgreSQL at settings.DATABASE_URL and are skipped when
it cannot be reached. All of them share one event loop so the module-level
SQLAlchemy engine pool stays valid across the session.
"""

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

import src.wl_account.infrastructure.db_models  # noqa: F401  -- register tables
import src.wl_audit.infrastructure.db_models  # noqa: F401
import src.wl_user.infrastructure.db_models  # noqa: F401
from src.wl_common.database import Base, engine
from src.wl_common.sql_unit_of_work import open_unit_of_work


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def schema() -> AsyncIterator[None]:
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, DBAPIError) as exc:
        pytest.skip(f"PostgreSQL unavailable: {exc}")
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(loop_scope="session")
async def uow_factory(schema: None) -> AsyncIterator:
    """Yields an async callable that opens a fresh unit of work per simulated request."""
    async with AsyncExitStack() as stack:

        async def open_uow():
            return await stack.enter_async_context(open_unit_of_work())

        yield open_uow

    async with engine.begin() as conn:
        await conn.execute(text("TRUNCATE audit_logs, accounts, users"))
