from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..config import settings
from .base import Base


def normalize_database_url(database_url: str) -> str:
    if database_url.startswith("postgresql://"):
        # Enforce async driver
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


def _build_async_engine() -> AsyncEngine:
    return create_async_engine(normalize_database_url(settings.DATABASE_URL), echo=False, future=True)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


engine: AsyncEngine = _build_async_engine()
SessionLocal = build_session_factory(engine)


@asynccontextmanager
async def session_scope(
    factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> AsyncIterator[AsyncSession]:
    """Async session context manager: one transaction, committed on success, rolled back on error."""
    async with (factory or SessionLocal)() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_all(target: Optional[AsyncEngine] = None) -> None:
    """Create all tables (dev only; prefer Alembic in production)."""
    # Register every mapped class on the metadata
    from . import models  # noqa: F401

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(create_all())
