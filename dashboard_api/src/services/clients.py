from __future__ import annotations

import logging
from typing import Tuple

from src.core.errors import NotFoundError, RepositoryError
from src.db.session import DatabaseManager
from src.repositories.clients import ClientRepository
from src.schemas.clients import Client, PaginationParams
from src.schemas.common import DataSource, PaginatedResponse, PaginationInfo
from src.services.base import BaseService
from src.services.fallback import find_fallback_client, paginate_fallback

logger = logging.getLogger(__name__)


class ClientListingService(BaseService):
    """
    Client listing with graceful degradation.

    The store is always tried first; when it fails the same listing semantics are
    applied to the sample clients and the result is tagged as fallback data.
    """

    def __init__(self, db: DatabaseManager) -> None:
        super().__init__(db)
        self.repo = ClientRepository(db)

    # PUBLIC_INTERFACE
    async def list_clients(self, params: PaginationParams) -> Tuple[PaginatedResponse[Client], DataSource]:
        """Return a page of clients and where it came from."""
        source: DataSource = "database"
        try:
            clients, total = await self.repo.list_clients(params)
            logger.info("Clients loaded from the database (%d of %d)", len(clients), total)
        except RepositoryError as exc:
            logger.warning("Database error, serving fallback clients: %s", exc)
            clients, total = paginate_fallback(params)
            source = "fallback"

        page = PaginatedResponse[Client](
            data=clients,
            pagination=PaginationInfo.build(params.page, params.limit, total),
        )
        return page, source

    # PUBLIC_INTERFACE
    async def get_client(self, client_id: str) -> Tuple[Client, DataSource]:
        """
        Return a single client.

        With a connected store, lookup failures propagate; without one the
        sample clients are searched.
        """
        if self.db.primary is not None:
            client = await self.repo.get_client(client_id)
            source: DataSource = "database"
        else:
            logger.warning("Database not connected, looking up client %s in fallback data", client_id)
            client = find_fallback_client(client_id)
            source = "fallback"
        if client is None:
            raise NotFoundError("Client not found")
        return client, source
