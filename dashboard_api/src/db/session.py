from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.core.errors import RepositoryError
from src.schemas.dashboard import ConnectionStatus, StoreProbe

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Owns the pooled engines of the primary and secondary stores.

    One instance is built at application startup and handed to repositories;
    connect()/disconnect() bound the lifetime of both pools.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.primary: Optional[AsyncEngine] = None
        self.secondary: Optional[AsyncEngine] = None

    def _create_engine(self, url: str, pool_size: int) -> AsyncEngine:
        if url.startswith("sqlite"):
            # SQLite dialects pick their own pool class, which takes no sizing arguments
            return create_async_engine(url, echo=self.settings.SQL_ECHO)
        return create_async_engine(
            url,
            echo=self.settings.SQL_ECHO,
            pool_size=pool_size,
            max_overflow=0,
            pool_recycle=self.settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,
        )

    async def _round_trip(self, engine: AsyncEngine) -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def _check_alive(self, engine: AsyncEngine, label: str) -> None:
        logger.info("Testing %s store connection...", label)
        try:
            await asyncio.wait_for(self._round_trip(engine), timeout=self.settings.DB_CONNECT_TIMEOUT)
        except asyncio.TimeoutError as exc:
            raise RepositoryError(f"Timed out connecting to the {label} store") from exc

    # PUBLIC_INTERFACE
    async def connect(self) -> None:
        """
        Create both pools and verify each with a round-trip.

        On any failure every engine created so far is disposed before the error
        propagates as RepositoryError, so no half-open pool is left behind.
        """
        if self.primary is not None or self.secondary is not None:
            await self.disconnect()
        try:
            self.primary = self._create_engine(self.settings.primary_url, self.settings.DB_POOL_SIZE)
            self.secondary = self._create_engine(self.settings.secondary_url, self.settings.DB2_POOL_SIZE)
            await self._check_alive(self.primary, "primary")
            await self._check_alive(self.secondary, "secondary")
        except Exception as exc:
            logger.error("Database connection failed: %s", exc)
            await self._release()
            if isinstance(exc, RepositoryError):
                raise
            raise RepositoryError("Database connection failed") from exc

        logger.info(
            "Connected to primary store %s:%s/%s and secondary store %s:%s/%s",
            self.settings.DB_HOST,
            self.settings.DB_PORT,
            self.settings.DB_NAME,
            self.settings.DB2_HOST,
            self.settings.DB2_PORT,
            self.settings.DB2_NAME,
        )

    async def _release(self) -> None:
        for engine in (self.primary, self.secondary):
            if engine is None:
                continue
            try:
                await engine.dispose()
            except Exception:
                logger.warning("Failed to dispose engine %s", engine.url, exc_info=True)
        self.primary = None
        self.secondary = None

    # PUBLIC_INTERFACE
    async def disconnect(self) -> None:
        """Dispose both pools. Safe to call when not connected."""
        if self.primary is None and self.secondary is None:
            return
        await self._release()
        logger.info("Database pools closed")

    # PUBLIC_INTERFACE
    def connection_status(self) -> ConnectionStatus:
        """Report which stores hold a live engine, without any I/O."""
        return ConnectionStatus(
            store1Connected=self.primary is not None,
            store2Connected=self.secondary is not None,
        )

    async def _probe(self, engine: Optional[AsyncEngine], label: str) -> StoreProbe:
        started = time.perf_counter()
        if engine is None:
            return StoreProbe(success=False, responseTime=0, error=f"{label} store not connected")
        try:
            await self._round_trip(engine)
        except Exception as exc:
            logger.error("Diagnostic query on the %s store failed: %s", label, exc)
            elapsed = int((time.perf_counter() - started) * 1000)
            return StoreProbe(success=False, responseTime=elapsed, error=f"{label} store query failed")
        return StoreProbe(success=True, responseTime=int((time.perf_counter() - started) * 1000))

    # PUBLIC_INTERFACE
    async def ping_primary(self) -> StoreProbe:
        """Time a trivial query on the primary store."""
        return await self._probe(self.primary, "primary")

    # PUBLIC_INTERFACE
    async def ping_secondary(self) -> StoreProbe:
        """Time a trivial query on the secondary store."""
        return await self._probe(self.secondary, "secondary")
