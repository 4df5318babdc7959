from __future__ import annotations

import logging
from typing import Tuple

from src.core.errors import RepositoryError
from src.db.session import DatabaseManager
from src.repositories.clients import ClientRepository
from src.schemas.common import DataSource
from src.schemas.dashboard import DashboardStats
from src.services.base import BaseService
from src.services.fallback import FALLBACK_STATS

logger = logging.getLogger(__name__)


class DashboardService(BaseService):
    """Aggregate counters for the dashboard header."""

    def __init__(self, db: DatabaseManager) -> None:
        super().__init__(db)
        self.repo = ClientRepository(db)

    # PUBLIC_INTERFACE
    async def get_stats(self) -> Tuple[DashboardStats, DataSource]:
        """Return the five counters as strings, or the fixed sample numbers when the store fails."""
        try:
            counts = await self.repo.get_dashboard_stats()
        except RepositoryError as exc:
            logger.warning("Database error for stats, serving fallback numbers: %s", exc)
            return FALLBACK_STATS, "fallback"
        logger.info("Dashboard stats loaded from the database")
        return DashboardStats(**{key: str(value) for key, value in counts.items()}), "database"
