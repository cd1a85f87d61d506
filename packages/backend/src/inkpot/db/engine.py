"""Async SQLAlchemy engine and session factory.

The Database handle owns one engine (connection pool) and hands out an
AsyncSession per request. It is created and disposed by the app lifespan
in main.py and reached through request.app.state; there is no
module-level engine.
"""

from typing import AsyncIterator, Optional

import structlog
from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from inkpot.db.models import Base

logger = structlog.get_logger()


class Database:
    """Connection lifecycle for the backing store."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def connect(self, create_tables: bool = False) -> None:
        """Create the engine. Optionally create missing tables (dev only)."""
        kwargs = {}
        if not self.url.startswith("sqlite"):
            # Pool: 5 steady connections, up to 20 under load.
            kwargs.update(pool_size=5, max_overflow=15)
        self.engine = create_async_engine(self.url, echo=self.echo, **kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        if create_tables:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("db.tables_created")

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self._session_factory = None

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database.connect() has not been called")
        return self._session_factory()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: yields a session per request, auto-closes."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
