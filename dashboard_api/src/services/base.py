from __future__ import annotations

from src.db.session import DatabaseManager


class BaseService:
    """
    Base class for services. Holds the database manager shared by repositories.

    Services should keep business logic and orchestration, delegating data access
    to repositories.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db
