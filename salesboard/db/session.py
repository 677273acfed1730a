"""
Async database engine and session factories.

PostgreSQL is reached through asyncpg, usually behind a transaction
pooler. The test suite points ``DATABASE_URL`` at SQLite (aiosqlite).
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from salesboard.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"poolclass": NullPool, "echo": settings.database_echo}
    if settings.uses_asyncpg:
        # Transaction poolers cannot keep prepared statements
        options["connect_args"] = {"statement_cache_size": 0}
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

# Records are handed out as pydantic copies, so nothing relies on expiry
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session dependency.

    Whatever the endpoint added (audit entries, admin activity) is
    committed when it returns and rolled back if it raises.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("Request failed, rolling back session")
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Session for code outside a request: app startup and scripts.

        async with get_db_context() as db:
            await ensure_admin_account(db)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""
    await engine.dispose()
