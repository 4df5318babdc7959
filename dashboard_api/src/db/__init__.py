"""
Database package initializer exposing the store configuration, the engine
manager and the ORM bases of both stores.
"""

from .base import PrimaryBase, SecondaryBase
from .config import get_settings, Settings
from .session import DatabaseManager

# Import models to ensure they are registered with SQLAlchemy metadata
# when the db package is imported.
from . import models as models  # noqa: F401

__all__ = [
    "PrimaryBase",
    "SecondaryBase",
    "Settings",
    "get_settings",
    "DatabaseManager",
    "models",
]
