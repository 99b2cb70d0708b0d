"""Database connection management.

Provides async database connection using SQLAlchemy with asyncpg.

## Configuration

Database connection is configured via environment variables:
- DATABASE_URL: Full PostgreSQL connection string
- DATABASE_POOL_SIZE: Connection pool size (default: 5)
- DATABASE_MAX_OVERFLOW: Max overflow connections (default: 10)

SQLite URLs (``sqlite+aiosqlite://``) are accepted for development and
tests; pool sizing does not apply to them.

## Usage

```python
from fuji_calendar.database import get_db, init_db

# Initialize on startup
await init_db()

# Use in request handlers
async with get_db() as session:
    location = await session.get(Location, location_id)
```
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fuji_calendar.config import get_settings
from fuji_calendar.database.models import Base

logger = logging.getLogger(__name__)

# Global engine and session factory
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite leaves ON DELETE CASCADE unenforced unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _engine_options(database_url: str) -> dict[str, Any]:
    settings = get_settings()
    options: dict[str, Any] = {"echo": settings.database_echo}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,  # Verify connections before use
        )
    return options


async def init_db(database_url: str | None = None) -> None:
    """Initialize the database connection.

    Creates the async engine and session factory. Should be called
    once on application startup.

    Args:
        database_url: Override for settings.database_url
    """
    global _engine, _session_factory

    url = database_url or get_settings().database_url

    logger.info("Initializing database connection")

    _engine = create_async_engine(url, **_engine_options(url))
    if url.startswith("sqlite"):
        event.listen(_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    logger.info("Database connection initialized")


async def close_db() -> None:
    """Close the database connection.

    Should be called on application shutdown.
    """
    global _engine, _session_factory

    if _engine:
        logger.info("Closing database connection")
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def create_tables() -> None:
    """Create all database tables.

    For development/testing only.
    """
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created")


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session.

    Use as an async context manager:
    ```python
    async with get_db() as session:
        # Use session
        await session.commit()
    ```

    The session is automatically closed when the context exits.
    Transactions are not automatically committed - call commit() explicitly.
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    session = _session_factory()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Usage:
    ```python
    @router.get("/locations")
    async def list_locations(db: AsyncSession = Depends(get_db_session)):
        ...
    ```
    """
    async with get_db() as session:
        yield session
