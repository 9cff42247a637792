"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — one engine per app, AsyncSession per
request, dependency injection via FastAPI.

The engine is NOT a module global: create_app() builds it from the
Settings it was given and stores it on app.state. get_db() pulls the
session factory off the running app, so two apps (e.g. two tests) never
share a database handle.
"""

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from gamehound.db.models import Base


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for a database URL.

    SQLite gets no pool sizing (single writer, file locking does the
    serialization); server databases get a small pool.
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=5,
        max_overflow=15,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False so handlers can read rows after commit
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_schema(engine: AsyncEngine) -> None:
    """Create any missing tables (CREATE TABLE IF NOT EXISTS semantics)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
