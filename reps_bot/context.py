from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .config import Settings
from .db.session import session_scope


@dataclass
class AppContext:
    """Everything a handler needs, passed in explicitly instead of read from globals.

    Registered on the dispatcher as workflow data, so aiogram injects it into
    any handler or middleware that declares a `ctx` argument.
    """

    settings: Settings
    session_factory: async_sessionmaker[AsyncSession]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        async with session_scope(self.session_factory) as session:
            yield session
