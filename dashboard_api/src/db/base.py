from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase


class PrimaryBase(DeclarativeBase):
    """Declarative base for tables of the primary store (sociétés and their counters)."""
    metadata = MetaData()


class SecondaryBase(DeclarativeBase):
    """Declarative base for tables of the secondary store (legal units)."""
    metadata = MetaData()
