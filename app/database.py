# python
"""Database engine and session utilities.

This module wraps the asynchronous SQLAlchemy engine and session factory in a
``Database`` object that the application creates once at startup and disposes
of at shutdown. Request handlers obtain sessions through ``get_db``, which
reads the instance from ``app.state``.
"""
import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the connection pool for the lifetime of the process."""

    def __init__(self, url: str, echo: bool = False, ssl: bool = False):
        connect_args: dict[str, Any] = {}
        if ssl and url.startswith("postgresql+asyncpg"):
            connect_args["ssl"] = "require"

        self.url = url
        self.engine = create_async_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(bind=self.engine, expire_on_commit=False)

    async def create_tables(self) -> None:
        """Create missing tables; existing tables are left untouched."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, Any]:
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        yield session
