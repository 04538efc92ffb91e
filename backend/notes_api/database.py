"""
Notes API: Database Engine & Session Management
===============================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   Creates one async engine (one connection pool) per process; the SQL
       repository opens a short-lived session per operation from the factory.
Who:   Used by SQLNoteRepository, the application lifespan and Alembic.
When:  Engine is created at module import; sessions are created per operation.

Connection Pooling:
    pool_size / max_overflow bound how many connections the handlers can
    hold at once. SQLite connections are opened with a busy timeout so a
    writer waits for a competing lock instead of failing immediately.
    In-memory SQLite URLs get SQLAlchemy's default single-connection pool,
    which does not accept pool sizing arguments.
"""

from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_api.config import settings


def _is_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def create_engine_from_settings(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Build an async engine for `database_url` (defaults to settings.database_url).

    Pool sizing and the SQLite busy timeout come from settings.
    """
    database_url = database_url or settings.database_url
    kwargs: Dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
    }

    if make_url(database_url).get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"timeout": settings.db_busy_timeout}

    if not _is_memory_sqlite(database_url):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )

    return create_async_engine(database_url, **kwargs)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: returned rows stay readable after the transaction ends
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


# ── Process-wide Engine ───────────────────────────────────────────────────
engine = create_engine_from_settings()
async_session_factory = create_session_factory(engine)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def check_connection(bind: Optional[AsyncEngine] = None) -> None:
    """
    Run `SELECT 1` against the store.

    Called once at startup; any exception propagates so the process exits
    instead of serving requests against an unreachable database.
    """
    bind = bind or engine
    async with bind.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    """Close every pooled connection. Called during application shutdown."""
    await engine.dispose()
