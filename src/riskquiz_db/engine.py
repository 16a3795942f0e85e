"""Async SQLAlchemy engine and session factory.

One engine per process, shared by the SQL port adapters, the ``/health``
probe and the seed CLI.  ``dispose_engine()`` closes the pool; the next
``get_engine()`` call builds a fresh one.
"""

import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from riskquiz_db.config import get_async_url

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the process-wide async engine, creating it if needed.

    ``PG_POOL_SIZE`` and ``PG_MAX_OVERFLOW`` are read when the engine is built.
    """
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            get_async_url(),
            pool_size=int(os.getenv("PG_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("PG_MAX_OVERFLOW", "10")),
            pool_pre_ping=True,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for the port adapters; objects stay usable after commit."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
