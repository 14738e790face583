from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from reps_bot.db.session import build_session_factory, create_all, session_scope
from reps_bot.services.users import get_or_create_user


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test; StaticPool keeps the single connection alive."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def user_id(session_factory) -> int:
    async with session_scope(session_factory) as session:
        user = await get_or_create_user(session, telegram_id=1001, username="tester", first_name="Test")
        return user.id


@pytest_asyncio.fixture
async def other_user_id(session_factory) -> int:
    async with session_scope(session_factory) as session:
        user = await get_or_create_user(session, telegram_id=2002, username="other")
        return user.id
