from __future__ import annotations

import logging
from datetime import datetime, time
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import Row, Select, asc, case, desc, func, or_, select

from src.core.errors import RepositoryError
from src.db.models import (
    Adresse,
    Contact,
    Entreprise,
    FactureFournisseur,
    Facturation,
    LegalUnit,
    Societe,
    SocieteUser,
)
from src.schemas.clients import DEFAULT_SORT_FIELD, Client, PaginationParams

from .base import BaseRepository

logger = logging.getLogger(__name__)

# Only sociétés of this pack are visible through the dashboard.
TENANT_PACK_ID = 11

# Allow-list of sortable keys. The counters are not columns of societe and
# sort by name instead.
SORT_COLUMNS = {
    "societe_name": Societe.societe_name,
    "created_at": Societe.societe_datecrea,
    "factures_count": Societe.societe_name,
    "contacts_count": Societe.societe_name,
    "entreprises_count": Societe.societe_name,
    "factures_fournisseurs_count": Societe.societe_name,
}

COUNTRY_LABELS = {"PAYS_BELGIQUE": "Belgique"}

_country = case(
    *[(Adresse.adresse_pays == code, label) for code, label in COUNTRY_LABELS.items()],
    else_=Adresse.adresse_pays,
).label("adresse_pays")


# PUBLIC_INTERFACE
def sort_column(sort_by: Optional[str]):
    """Map a requested sort key onto a safe column; unknown keys use the company name."""
    return SORT_COLUMNS.get(sort_by or DEFAULT_SORT_FIELD, Societe.societe_name)


# PUBLIC_INTERFACE
def format_address(parts: Sequence[object]) -> str:
    """Join the non-blank address parts with single spaces."""
    return " ".join(str(p) for p in parts if p is not None and str(p).strip())


class ClientRepository(BaseRepository):
    """Reads sociétés and their counters from the primary store, legal units from the secondary."""

    def _visible(self) -> list:
        return [Societe.pack_id == TENANT_PACK_ID, Societe.societe_valid == 1]

    def _with_address(self, stmt: Select) -> Select:
        return stmt.select_from(Societe).join(Adresse, Adresse.adresse_id == Societe.societe_adresse_id)

    def _conditions(self, params: PaginationParams) -> list:
        conditions = self._visible()
        term = params.search
        if term:
            like = f"%{term}%"
            conditions.append(or_(Societe.societe_name.ilike(like), Adresse.adresse_rue.ilike(like)))
        if params.dateFrom is not None:
            conditions.append(Societe.societe_datecrea >= datetime.combine(params.dateFrom, time.min))
        if params.dateTo is not None:
            # dateTo only narrows the fallback listing; the store query keeps the lower bound only.
            logger.debug("dateTo=%s is not applied to the store query", params.dateTo)
        return conditions

    def _row_query(self) -> Select:
        return self._with_address(
            select(
                Societe.societe_id,
                Societe.societe_name,
                Adresse.adresse_rue,
                Adresse.adresse_numero,
                Adresse.adresse_cp,
                _country,
                Societe.societe_valid,
                Societe.societe_datecrea,
            )
        )

    # PUBLIC_INTERFACE
    async def list_clients(self, params: PaginationParams) -> Tuple[List[Client], int]:
        """
        Return one page of clients and the total matching count.

        Filtering: pack/validity, optional search on name or street, optional
        lower creation-date bound. Rows are ordered through SORT_COLUMNS with the
        société id as tie-break, then each row is enriched concurrently.
        """
        conditions = self._conditions(params)
        count_stmt = self._with_address(select(func.count())).where(*conditions)
        total = int(await self.scalar(count_stmt) or 0)

        direction = desc if params.sortOrder == "desc" else asc
        stmt = (
            self._row_query()
            .where(*conditions)
            .order_by(direction(sort_column(params.sortBy)), direction(Societe.societe_id))
            .offset(params.offset)
            .limit(params.limit)
        )
        rows = await self.all(stmt)
        clients = await self.gather_or_cancel(*(self._to_client(row) for row in rows))
        return list(clients), total

    # PUBLIC_INTERFACE
    async def get_client(self, client_id: str) -> Optional[Client]:
        """Return one visible société by id, or None."""
        # isdigit() alone also accepts non-ASCII digits such as "²"
        if not (client_id.isascii() and client_id.isdigit()):
            return None
        stmt = self._row_query().where(*self._visible(), Societe.societe_id == int(client_id))
        row = await self.first(stmt)
        if row is None:
            return None
        return await self._to_client(row)

    async def _to_client(self, row: Row) -> Client:
        societe_id = row.societe_id
        contact, factures, contacts, entreprises, fournisseurs, has_legal_unit = await self.gather_or_cancel(
            self._primary_contact(societe_id),
            self._count_for(Facturation, societe_id),
            self._count_for(Contact, societe_id),
            self._count_for(Entreprise, societe_id),
            self._count_for(FactureFournisseur, societe_id),
            self.has_legal_unit(societe_id),
        )
        email = ""
        phone = ""
        if contact is not None:
            email = contact.user_pname or contact.user_name or ""
            phone = contact.user_phone or ""
        return Client(
            id=str(societe_id),
            societe_name=row.societe_name,
            email=email,
            phone=phone,
            address=format_address(
                [row.adresse_rue, row.adresse_numero, row.adresse_cp, row.adresse_pays]
            ),
            created_at=row.societe_datecrea,
            updated_at=row.societe_datecrea,
            factures_count=factures,
            contacts_count=contacts,
            entreprises_count=entreprises,
            factures_fournisseurs_count=fournisseurs,
            has_legal_unit=has_legal_unit,
        )

    async def _primary_contact(self, societe_id: int) -> Optional[Row]:
        stmt = (
            select(SocieteUser.user_pname, SocieteUser.user_name, SocieteUser.user_phone)
            .where(
                SocieteUser.user_societe_id == societe_id,
                SocieteUser.user_compte == 1,
                SocieteUser.user_type == 1,
                SocieteUser.user_valid == 1,
            )
            .order_by(SocieteUser.user_id)
            .limit(1)
        )
        return await self.first(stmt)

    async def _count_for(self, model, societe_id: int) -> int:
        stmt = select(func.count()).select_from(model).where(model.societe_id == societe_id)
        return int(await self.scalar(stmt) or 0)

    # PUBLIC_INTERFACE
    async def has_legal_unit(self, societe_id: int) -> bool:
        """
        Whether the secondary store holds a legal unit for this société.

        The flag is advisory: an unavailable secondary store reads as False.
        """
        engine = self.db.secondary
        if engine is None:
            logger.warning("Secondary store not connected; legal unit check skipped")
            return False
        stmt = select(func.count()).select_from(LegalUnit).where(LegalUnit.tenant_id == str(societe_id))
        try:
            count = await self.scalar(stmt, engine=engine)
        except RepositoryError as exc:
            logger.error("Legal unit check failed for societe %s: %s", societe_id, exc)
            return False
        return bool(count)

    # PUBLIC_INTERFACE
    async def get_dashboard_stats(self) -> Dict[str, int]:
        """Five counts scoped to visible sociétés and, where present, the row's own validity flag."""
        visible = self._visible()
        statements = {
            "totalClients": select(func.count()).select_from(Societe).where(*visible),
            "totalFactures": select(func.count())
            .select_from(Facturation)
            .join(Societe, Societe.societe_id == Facturation.societe_id)
            .where(*visible),
            "totalContacts": select(func.count())
            .select_from(Contact)
            .join(Societe, Societe.societe_id == Contact.societe_id)
            .where(*visible),
            "totalEntreprises": select(func.count())
            .select_from(Entreprise)
            .join(Societe, Societe.societe_id == Entreprise.societe_id)
            .where(*visible, Entreprise.entreprise_valid == 1),
            "totalFacturesFournisseurs": select(func.count())
            .select_from(FactureFournisseur)
            .join(Societe, Societe.societe_id == FactureFournisseur.societe_id)
            .where(*visible, FactureFournisseur.facture_fournisseur_valid == 1),
        }
        values = await self.gather_or_cancel(*(self.scalar(stmt) for stmt in statements.values()))
        return {key: int(value or 0) for key, value in zip(statements, values)}
