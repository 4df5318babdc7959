from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import PrimaryBase


class Societe(PrimaryBase):
    """Company record; the unit listed as a "client"."""
    __tablename__ = "societe"

    societe_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    societe_name: Mapped[str] = mapped_column(String(255), nullable=False)
    societe_adresse_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    societe_valid: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    societe_datecrea: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    pack_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class Adresse(PrimaryBase):
    """Postal address referenced by societe.societe_adresse_id."""
    __tablename__ = "adresse"

    adresse_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    adresse_rue: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    adresse_numero: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    adresse_cp: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    adresse_pays: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)


class SocieteUser(PrimaryBase):
    """Account attached to a société; admin accounts provide the primary contact."""
    __tablename__ = "user"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_societe_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    user_pname: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    user_phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_compte: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    user_type: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    user_valid: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class Facturation(PrimaryBase):
    """Customer invoice."""
    __tablename__ = "facturation"

    facturation_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    societe_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)


class Contact(PrimaryBase):
    __tablename__ = "contacts"

    contact_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    societe_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)


class Entreprise(PrimaryBase):
    """Sub-company managed by a société."""
    __tablename__ = "entreprise"

    entreprise_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    societe_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    entreprise_valid: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class FactureFournisseur(PrimaryBase):
    """Supplier invoice."""
    __tablename__ = "facture_fournisseur"

    facture_fournisseur_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    societe_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    facture_fournisseur_valid: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
