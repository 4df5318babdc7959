from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import SecondaryBase


class LegalUnit(SecondaryBase):
    """Legal unit; its tenant_id holds the owning société id as a string."""
    __tablename__ = "legal_unit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
