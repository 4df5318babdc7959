"""
Static sample data served when the stores are unreachable, and the in-memory
listing pipeline that mirrors the store query on that data.
"""
from __future__ import annotations

from datetime import datetime, time
from typing import Any, List, Optional, Tuple

from src.schemas.clients import CLIENT_SORT_FIELDS, DEFAULT_SORT_FIELD, Client, PaginationParams
from src.schemas.dashboard import DashboardStats

FALLBACK_STATS = DashboardStats(
    totalClients="20",
    totalFactures="2847",
    totalContacts="98",
    totalEntreprises="98",
    totalFacturesFournisseurs="623",
)


def _client(
    id: int,
    name: str,
    email: str,
    phone: str,
    address: str,
    created: str,
    counts: Tuple[int, int, int, int],
    legal_unit: bool,
) -> Client:
    created_at = datetime.fromisoformat(created)
    return Client(
        id=str(id),
        societe_name=name,
        email=email,
        phone=phone,
        address=address,
        created_at=created_at,
        updated_at=created_at,
        factures_count=counts[0],
        contacts_count=counts[1],
        entreprises_count=counts[2],
        factures_fournisseurs_count=counts[3],
        has_legal_unit=legal_unit,
    )


FALLBACK_CLIENTS: List[Client] = [
    _client(1, "Atelier Dupont", "contact@atelier-dupont.be", "+32 2 512 34 01",
            "Rue de la Loi 16 1000 Belgique", "2023-01-12T09:15:00", (142, 6, 6, 31), True),
    _client(2, "Boulangerie Lambert", "info@lambert-pain.be", "+32 4 221 10 02",
            "Rue Saint-Gilles 45 4000 Belgique", "2023-02-03T14:30:00", (87, 4, 4, 12), False),
    _client(3, "Cabinet Verhaegen", "office@verhaegen.be", "+32 3 233 45 03",
            "Meir 78 2000 Belgique", "2023-02-27T10:00:00", (203, 8, 8, 44), True),
    _client(4, "Delhaize Consulting", "hello@delhaize-consulting.be", "+32 2 640 12 04",
            "Avenue Louise 231 1050 Belgique", "2023-03-18T11:45:00", (176, 5, 5, 38), True),
    _client(5, "Éditions Marchal", "redaction@marchal.be", "+32 81 22 33 05",
            "Rue de Fer 12 5000 Belgique", "2023-04-02T08:20:00", (64, 3, 3, 9), False),
    _client(6, "Fiduciaire Hermans", "compta@hermans.be", "+32 9 225 66 06",
            "Veldstraat 90 9000 Belgique", "2023-04-21T16:05:00", (311, 9, 9, 57), True),
    _client(7, "Garage Peeters", "garage@peeters.be", "+32 16 20 44 07",
            "Bondgenotenlaan 130 3000 Belgique", "2023-05-09T07:50:00", (129, 4, 4, 26), False),
    _client(8, "Horticulture Wauters", "jardin@wauters.be", "+32 10 45 67 08",
            "Grand-Place 3 1348 Belgique", "2023-06-01T13:10:00", (58, 2, 2, 8), True),
    _client(9, "Imprimerie Collard", "print@collard.be", "+32 65 33 21 09",
            "Rue de Nimy 58 7000 Belgique", "2023-06-24T10:40:00", (97, 5, 5, 19), False),
    _client(10, "Jacobs & Fils", "info@jacobsfils.be", "+32 50 34 12 10",
            "Steenstraat 21 8000 Belgique", "2023-07-15T15:25:00", (184, 7, 7, 35), True),
    _client(11, "Kinésithérapie Renard", "rdv@renard-kine.be", "+32 71 30 55 11",
            "Boulevard Tirou 102 6000 Belgique", "2023-08-08T09:05:00", (45, 2, 2, 6), False),
    _client(12, "Librairie Claes", "livres@claes.be", "+32 11 22 98 12",
            "Hoogstraat 7 3500 Belgique", "2023-09-01T12:00:00", (73, 3, 3, 14), True),
    _client(13, "Menuiserie Simon", "atelier@menuiserie-simon.be", "+32 87 35 41 13",
            "Rue du Collège 19 4800 Belgique", "2023-09-26T08:35:00", (118, 6, 6, 23), True),
    _client(14, "Notariat Lemaire", "etude@lemaire-notaire.be", "+32 2 347 80 14",
            "Chaussée de Waterloo 880 1180 Belgique", "2023-10-19T17:15:00", (265, 8, 8, 49), True),
    _client(15, "Optique Dubois", "vue@optique-dubois.be", "+32 67 21 09 15",
            "Rue de Mons 33 1400 Belgique", "2023-11-10T10:30:00", (82, 3, 3, 11), False),
    _client(16, "Pharmacie Goossens", "officine@goossens.be", "+32 14 41 23 16",
            "Grote Markt 9 2300 Belgique", "2023-12-05T09:45:00", (156, 5, 5, 30), True),
    _client(17, "Quincaillerie Martin", "vente@quincaillerie-martin.be", "+32 63 22 67 17",
            "Grand-Rue 41 6700 Belgique", "2024-01-16T14:00:00", (109, 4, 4, 21), False),
    _client(18, "Restaurant Le Zinc", "reservation@lezinc.be", "+32 2 511 90 18",
            "Rue des Bouchers 6 1000 Belgique", "2024-02-22T11:20:00", (134, 6, 6, 27), True),
    _client(19, "Transports Willems", "dispatch@willems-transport.be", "+32 53 70 14 19",
            "Industrielaan 55 9300 Belgique", "2024-03-30T06:55:00", (398, 10, 10, 71), True),
    _client(20, "Vins Janssens", "cave@vins-janssens.be", "+32 15 20 88 20",
            "Bruul 62 2800 Belgique", "2024-05-14T16:40:00", (162, 4, 4, 1), False),
]


def _matches(client: Client, term: str) -> bool:
    return any(
        term in (value or "").lower()
        for value in (client.societe_name, client.email, client.phone)
    )


def _sort_key(field: str):
    def key(client: Client) -> Tuple[bool, Any]:
        value = getattr(client, field)
        if isinstance(value, str):
            value = value.lower()
        return (value is None, value if value is not None else 0)

    return key


# PUBLIC_INTERFACE
def filter_clients(clients: List[Client], params: PaginationParams) -> List[Client]:
    """
    Apply search and creation-date bounds in memory.

    Search is a case-insensitive substring on name, email and phone. Both date
    bounds are inclusive; dateTo covers its whole day.
    """
    result = list(clients)
    if params.search:
        term = params.search.lower()
        result = [c for c in result if _matches(c, term)]
    lower: Optional[datetime] = datetime.combine(params.dateFrom, time.min) if params.dateFrom else None
    upper: Optional[datetime] = datetime.combine(params.dateTo, time.max) if params.dateTo else None
    if lower is not None:
        result = [c for c in result if c.created_at is not None and c.created_at >= lower]
    if upper is not None:
        result = [c for c in result if c.created_at is not None and c.created_at <= upper]
    return result


# PUBLIC_INTERFACE
def sort_clients(clients: List[Client], sort_by: str, sort_order: str) -> List[Client]:
    """Stable sort on any Client field; unknown fields sort by company name."""
    field = sort_by if sort_by in CLIENT_SORT_FIELDS else DEFAULT_SORT_FIELD
    return sorted(clients, key=_sort_key(field), reverse=sort_order == "desc")


# PUBLIC_INTERFACE
def paginate_fallback(params: PaginationParams, clients: Optional[List[Client]] = None) -> Tuple[List[Client], int]:
    """Run the full filter/sort/slice pipeline over the sample clients."""
    source = FALLBACK_CLIENTS if clients is None else clients
    ordered = sort_clients(filter_clients(source, params), params.sortBy, params.sortOrder)
    start = params.offset
    return ordered[start:start + params.limit], len(ordered)


# PUBLIC_INTERFACE
def find_fallback_client(client_id: str) -> Optional[Client]:
    return next((c for c in FALLBACK_CLIENTS if c.id == client_id), None)
