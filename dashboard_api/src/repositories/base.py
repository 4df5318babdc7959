from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, List, Optional

from sqlalchemy import Executable, Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from src.core.errors import RepositoryError
from src.db.session import DatabaseManager

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Each helper checks a connection out of the engine's pool for the duration
    of one statement, so independent queries can run concurrently up to the
    pool size. Driver and SQLAlchemy failures surface as RepositoryError.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    def _primary(self) -> AsyncEngine:
        if self.db.primary is None:
            raise RepositoryError("Primary store not connected")
        return self.db.primary

    @asynccontextmanager
    async def connection(self, engine: Optional[AsyncEngine] = None) -> AsyncIterator[AsyncConnection]:
        """Yield a pooled connection, translating store failures into RepositoryError."""
        engine = engine or self._primary()
        try:
            async with engine.connect() as conn:
                yield conn
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Query failed: %s", exc)
            raise RepositoryError("Database query failed") from exc

    async def scalar(self, statement: Executable, engine: Optional[AsyncEngine] = None) -> Any:
        """Execute and return the first column of the first row."""
        async with self.connection(engine) as conn:
            result = await conn.execute(statement)
            return result.scalar()

    async def first(self, statement: Executable, engine: Optional[AsyncEngine] = None) -> Optional[Row]:
        """Execute and return the first row or None."""
        async with self.connection(engine) as conn:
            result = await conn.execute(statement)
            return result.first()

    async def all(self, statement: Executable, engine: Optional[AsyncEngine] = None) -> List[Row]:
        """Execute and return every row."""
        async with self.connection(engine) as conn:
            result = await conn.execute(statement)
            return list(result.all())

    async def gather_or_cancel(self, *aws: Awaitable[Any]) -> List[Any]:
        """
        Run awaitables concurrently and return their results in order.

        When one fails (or the caller is cancelled) the others are cancelled and
        awaited before the error propagates, so their pooled connections are
        returned before the caller moves on.
        """
        tasks = [asyncio.ensure_future(aw) for aw in aws]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
