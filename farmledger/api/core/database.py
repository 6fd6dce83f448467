"""
Database engine, session and transaction helpers for the Farm Ledger API
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from farmledger.api.config import Settings, settings as default_settings

Base = declarative_base()


class Database:
    """
    Owns the connection pool and hands out sessions

    One instance is built at application startup and stored on
    ``app.state.database``; repositories never touch the engine directly.
    """

    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        self.engine: AsyncEngine = create_async_engine(
            config.DATABASE_URL,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
            echo=config.DB_ECHO,
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def dispose(self) -> None:
        """Close all pooled connections"""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Dependency returning the Database built during startup"""
    database = getattr(request.app.state, "database", None)
    if database is None:
        # Lifespan did not run (e.g. a bare ASGI mount); build lazily
        database = Database()
        request.app.state.database = database
    return database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency yielding one AsyncSession per request

    Usage:
        @router.get("/")
        async def handler(db: AsyncSession = Depends(get_db)):
            ...
    """
    database = get_database(request)
    async with database.session_factory() as session:
        yield session


def get_session_factory(request: Request) -> async_sessionmaker:
    """Dependency for code that needs several independent sessions at once"""
    return get_database(request).session_factory


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Run a multi-statement write as one unit

    Commits when the block exits cleanly, rolls back and re-raises otherwise.
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
