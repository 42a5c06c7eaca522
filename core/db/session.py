"""Database session manager."""

import contextlib
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class DatabaseSessionManager:
    """Owns the async engine and hands out one session per unit of work."""

    def __init__(self, *, search_path: str | None = None) -> None:
        """Constructor."""
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None
        self._search_path = search_path

    @property
    def initialized(self) -> bool:
        """True once ``init`` has created an engine."""
        return self._engine is not None

    def init(self, url: str) -> None:
        """Create the engine and sessionmaker for ``url``."""
        connect_args = {}
        if self._search_path:
            connect_args["server_settings"] = {"search_path": self._search_path}

        self._engine = create_async_engine(
            url,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        self._sessionmaker = async_sessionmaker(
            self._engine, expire_on_commit=False, autoflush=False
        )

    async def close(self) -> None:
        """Dispose engine and drop references."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

    @contextlib.asynccontextmanager
    async def connect(self) -> AsyncIterator[AsyncConnection]:
        """Yield an AsyncConnection within a BEGIN block."""
        if self._engine is None:
            raise RuntimeError("DatabaseSessionManager is not initialized")
        async with self._engine.begin() as conn:
            yield conn

    @contextlib.asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield an AsyncSession; caller manages commit, errors roll back."""
        if self._sessionmaker is None:
            raise RuntimeError("DatabaseSessionManager is not initialized")
        session = self._sessionmaker()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_all(self, base: type[DeclarativeBase]) -> None:
        """Create all tables declared on ``base``."""
        async with self.connect() as conn:
            await conn.run_sync(base.metadata.create_all)
