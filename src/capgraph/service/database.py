"""
Database wiring for the SQLAlchemy data store.

Provides:
- Base model class
- Database: lazily created async engine and session maker, configured from
  CAPGRAPH_DATABASE_URL (and SQL_ECHO)
- a FastAPI dependency yielding a SQLAlchemyDataStore per request
"""

from __future__ import annotations

import os
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .store import SQLAlchemyDataStore


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def get_database_url() -> str:
    """Get database URL from environment."""
    return os.getenv("CAPGRAPH_DATABASE_URL", "sqlite+aiosqlite:///./capgraph.db")


class Database:
    """
    Engine and session factory for one database.

    Usage:
        db = Database(models={"Order": Order, "Customer": Customer})
        router = create_read_router(operations, get_store=db.store_dependency)
    """

    def __init__(
        self,
        models: dict[str, type[DeclarativeBase]],
        url: Optional[str] = None,
    ):
        self.models = models
        self.url = url or get_database_url()
        self._engine: Optional[AsyncEngine] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(
                self.url,
                echo=os.getenv("SQL_ECHO", "").lower() == "true",
            )
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def create_all(self, base: type[DeclarativeBase] = Base):
        """Create tables for every model registered on ``base``."""
        async with self.engine.begin() as conn:
            await conn.run_sync(base.metadata.create_all)

    async def store_dependency(self) -> AsyncGenerator[SQLAlchemyDataStore, None]:
        """FastAPI dependency: one session-backed store per request."""
        async with self.session_maker() as session:
            yield SQLAlchemyDataStore(session, self.models)

    async def close(self):
        """Dispose the engine; the next use creates a fresh one."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_maker = None
