"""
Repository and connection-manager tests against two seeded SQLite stores.

See tests/conftest.py::seed_stores for the dataset.
"""

import asyncio
from datetime import date

import pytest

from src.core.errors import RepositoryError
from src.db.session import DatabaseManager
from src.db.models import Facturation
from src.repositories.clients import ClientRepository, format_address, sort_column
from src.schemas.clients import PaginationParams
from src.services.clients import ClientListingService
from src.services.dashboard import DashboardService


def _names(clients):
    return [c.societe_name for c in clients]


# ========================= CONNECTION ==========================


async def test_connect_opens_both_stores(seeded_db):
    status = seeded_db.connection_status()
    assert status.store1Connected and status.store2Connected

    result = await seeded_db.ping_primary()
    assert result.success and result.error is None


async def test_disconnect_is_idempotent(store_settings):
    db = DatabaseManager(store_settings)
    await db.connect()
    await db.disconnect()
    await db.disconnect()
    assert db.primary is None and db.secondary is None


async def test_unreachable_store_raises_and_leaves_no_pool(tmp_path, make_store_settings):
    settings = make_store_settings(tmp_path / "missing" / "a.db", tmp_path / "missing" / "b.db")
    db = DatabaseManager(settings)

    with pytest.raises(RepositoryError) as excinfo:
        await db.connect()
    assert db.primary is None and db.secondary is None
    # driver text (paths, user@host) stays in the logs
    assert excinfo.value.message == "Database connection failed"


async def test_slow_store_times_out(store_settings):
    class SlowManager(DatabaseManager):
        async def _round_trip(self, engine):
            await asyncio.sleep(1)

    db = SlowManager(store_settings.model_copy(update={"DB_CONNECT_TIMEOUT": 0.05}))
    with pytest.raises(RepositoryError, match="Timed out connecting to the primary store"):
        await db.connect()
    assert db.primary is None


async def test_ping_without_connection_reports_failure(make_store_settings):
    result = await DatabaseManager(make_store_settings("a.db", "b.db")).ping_secondary()
    assert not result.success
    assert result.error == "secondary store not connected"


async def test_failed_ping_hides_driver_error(store_settings):
    class RefusingManager(DatabaseManager):
        async def _round_trip(self, engine):
            raise OSError("Access denied for user 'root'@'10.0.0.7'")

    db = RefusingManager(store_settings)
    db.primary = object()

    result = await db.ping_primary()
    assert not result.success
    assert result.error == "primary store query failed"


# ========================= LISTING ==========================


async def test_only_visible_societes_are_listed(seeded_db):
    clients, total = await ClientRepository(seeded_db).list_clients(PaginationParams())

    assert total == 4
    assert _names(clients) == ["Alpha Conseil", "Beta Logistique", "Gamma Services", "Zeta Port"]


async def test_client_is_enriched_with_contact_counts_and_legal_unit(seeded_db):
    clients, _ = await ClientRepository(seeded_db).list_clients(PaginationParams())
    by_name = {c.societe_name: c for c in clients}

    alpha = by_name["Alpha Conseil"]
    assert alpha.id == "1"
    assert alpha.email == "alice@alpha.be"
    assert alpha.phone == "0470 11 22 33"
    assert alpha.address == "Rue Haute 12 1000 Belgique"
    assert (alpha.factures_count, alpha.contacts_count) == (3, 2)
    assert (alpha.entreprises_count, alpha.factures_fournisseurs_count) == (3, 2)
    assert alpha.has_legal_unit is True
    assert alpha.updated_at == alpha.created_at

    beta = by_name["Beta Logistique"]
    assert beta.email == "ops@beta.be"
    assert beta.phone == ""
    assert beta.address == "Avenue du Port 7 1080 France"
    assert beta.has_legal_unit is False

    gamma = by_name["Gamma Services"]
    assert gamma.email == "" and gamma.phone == ""
    assert gamma.address == "Chaussée de Mons 7000 Belgique"
    assert gamma.has_legal_unit is True

    assert by_name["Zeta Port"].address == "Rue du Port 3 4000"


async def test_search_matches_name_or_street(seeded_db):
    clients, total = await ClientRepository(seeded_db).list_clients(PaginationParams(search="  PORT "))

    assert total == 2
    assert _names(clients) == ["Beta Logistique", "Zeta Port"]


async def test_date_from_is_inclusive(seeded_db):
    params = PaginationParams(dateFrom=date(2023, 3, 5))
    clients, total = await ClientRepository(seeded_db).list_clients(params)

    assert total == 3
    assert "Beta Logistique" not in _names(clients)


async def test_date_to_does_not_narrow_the_store_query(seeded_db):
    params = PaginationParams(dateTo=date(2023, 1, 31))
    _, total = await ClientRepository(seeded_db).list_clients(params)
    assert total == 4


async def test_sort_by_created_at(seeded_db):
    params = PaginationParams(sortBy="created_at")
    clients, _ = await ClientRepository(seeded_db).list_clients(params)
    assert _names(clients) == ["Beta Logistique", "Gamma Services", "Alpha Conseil", "Zeta Port"]


async def test_counter_sort_keys_order_by_name(seeded_db):
    params = PaginationParams(sortBy="factures_count", sortOrder="desc")
    clients, _ = await ClientRepository(seeded_db).list_clients(params)
    assert _names(clients) == ["Zeta Port", "Gamma Services", "Beta Logistique", "Alpha Conseil"]


async def test_pagination_slices_after_sorting(seeded_db):
    params = PaginationParams(page=2, limit=3)
    clients, total = await ClientRepository(seeded_db).list_clients(params)

    assert total == 4
    assert _names(clients) == ["Zeta Port"]


def test_sort_column_allow_list():
    assert sort_column("created_at").key == "societe_datecrea"
    assert sort_column("societe_name; DROP TABLE societe").key == "societe_name"
    assert sort_column(None).key == "societe_name"


def test_format_address_skips_blank_parts():
    assert format_address(["Rue Haute", "", None, "1000", "  ", "Belgique"]) == "Rue Haute 1000 Belgique"


# ========================= LOOKUP ==========================


async def test_get_client_by_id(seeded_db):
    client = await ClientRepository(seeded_db).get_client("3")
    assert client.societe_name == "Gamma Services"
    assert client.factures_fournisseurs_count == 2


@pytest.mark.parametrize("client_id", ["4", "5", "999", "abc", "²", "١"])
async def test_hidden_or_unknown_client_is_none(seeded_db, client_id):
    assert await ClientRepository(seeded_db).get_client(client_id) is None


async def test_failed_enrichment_cancels_sibling_queries(seeded_db):
    cancelled = []

    class FlakyRepository(ClientRepository):
        async def _count_for(self, model, societe_id):
            if model is Facturation:
                raise RepositoryError("Database query failed")
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append((model.__tablename__, societe_id))
                raise
            return 0

    with pytest.raises(RepositoryError):
        await FlakyRepository(seeded_db).list_clients(PaginationParams())

    # the slow counters of every listed société were cancelled before the error surfaced
    assert {table for table, _ in cancelled} == {"contacts", "entreprise", "facture_fournisseur"}
    assert {societe_id for _, societe_id in cancelled} == {1, 2, 3, 6}


async def test_gather_or_cancel_keeps_order(seeded_db):
    async def value(v, delay):
        await asyncio.sleep(delay)
        return v

    repo = ClientRepository(seeded_db)
    assert await repo.gather_or_cancel(value("a", 0.02), value("b", 0)) == ["a", "b"]
    assert await repo.gather_or_cancel() == []


# ========================= LEGAL UNITS ==========================


async def test_legal_unit_is_false_without_secondary_store(seeded_db):
    await seeded_db.secondary.dispose()
    seeded_db.secondary = None

    assert await ClientRepository(seeded_db).has_legal_unit(1) is False


async def test_legal_unit_is_false_when_secondary_query_fails(store_paths, tmp_path, make_store_settings):
    db = DatabaseManager(make_store_settings(store_paths["primary"], tmp_path / "no_tables.db"))
    await db.connect()
    try:
        repo = ClientRepository(db)
        assert await repo.has_legal_unit(1) is False
        client = await repo.get_client("1")
        assert client.has_legal_unit is False
    finally:
        await db.disconnect()


# ========================= STATS & SERVICES ==========================


async def test_dashboard_stats_counts_visible_rows(seeded_db):
    stats = await ClientRepository(seeded_db).get_dashboard_stats()
    assert stats == {
        "totalClients": 4,
        "totalFactures": 4,
        "totalContacts": 3,
        "totalEntreprises": 3,
        "totalFacturesFournisseurs": 3,
    }


async def test_dashboard_service_serializes_counts_as_strings(seeded_db):
    stats, source = await DashboardService(seeded_db).get_stats()
    assert source == "database"
    assert stats.totalClients == "4"
    assert stats.totalFacturesFournisseurs == "3"


async def test_listing_service_falls_back_when_not_connected(store_settings):
    service = ClientListingService(DatabaseManager(store_settings))
    page, source = await service.list_clients(PaginationParams(page=2, limit=10))

    assert source == "fallback"
    assert page.pagination.total == 20
    assert page.pagination.totalPages == 2
    assert len(page.data) == 10


async def test_listing_service_uses_store_when_connected(seeded_db):
    page, source = await ClientListingService(seeded_db).list_clients(PaginationParams())

    assert source == "database"
    assert page.pagination.model_dump() == {"page": 1, "limit": 10, "total": 4, "totalPages": 1}
