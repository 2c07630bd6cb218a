import os
from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool, StaticPool


engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[sessionmaker] = None
Base = declarative_base()


def normalize_database_url(url: str | None) -> str:
    """Return ``url`` with an async driver, raising if it is unset."""

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is required")
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # Versus deletes rely on ON DELETE CASCADE, which SQLite ignores by default.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _engine_options(database_url: str) -> dict:
    if not database_url.startswith("sqlite+aiosqlite://"):
        return {"echo": False, "pool_pre_ping": True}
    # An in-memory database only lives as long as its single connection.
    poolclass = StaticPool if ":memory:" in database_url else NullPool
    return {"echo": False, "poolclass": poolclass}


def get_engine() -> AsyncEngine:
    """Return the engine, creating it from ``DATABASE_URL`` on first use.

    Nothing is read from the environment at import time, so tests can point
    ``DATABASE_URL`` at a throwaway database before the first session opens.
    """

    global engine, AsyncSessionLocal

    if engine is None:
        database_url = normalize_database_url(os.getenv("DATABASE_URL"))
        engine = create_async_engine(database_url, **_engine_options(database_url))
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        AsyncSessionLocal = sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )

    return engine


def get_sessionmaker() -> sessionmaker:
    if AsyncSessionLocal is None:
        get_engine()

    assert AsyncSessionLocal is not None  # for type checkers
    return AsyncSessionLocal


async def get_session() -> AsyncSession:
    """Provide a database session for FastAPI dependencies."""

    async with get_sessionmaker()() as session:
        yield session
