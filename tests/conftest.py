"""
Global pytest configuration and fixtures.

This file centralizes:
1. Test environment variables (token secret, dashboard account).
2. Two SQLite files standing in for the MySQL stores, seeded with a small
   known dataset through a synchronous engine.
3. DatabaseManager instances pointed at those files, or one that can never
   connect (to exercise the fallback data).
4. FastAPI TestClients wired to either manager through app.state.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator

# Must be set before the application settings are read
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, insert  # noqa: E402

from src.api.main import app  # noqa: E402
from src.core.errors import RepositoryError  # noqa: E402
from src.core.security import CredentialStore, create_access_token  # noqa: E402
from src.db.base import PrimaryBase, SecondaryBase  # noqa: E402
from src.db.config import Settings  # noqa: E402
from src.db.models import (  # noqa: E402
    Adresse,
    Contact,
    Entreprise,
    FactureFournisseur,
    Facturation,
    LegalUnit,
    Societe,
    SocieteUser,
)
from src.db.session import DatabaseManager  # noqa: E402

# ========================== STORES ==========================


def seed_stores(primary: Path, secondary: Path) -> None:
    """
    Create both schemas and insert the reference dataset.

    Visible sociétés (pack 11, valid): 1 Alpha Conseil, 2 Beta Logistique,
    3 Gamma Services, 6 Zeta Port. Société 4 has another pack, 5 is invalid.
    """
    engine = create_engine(f"sqlite:///{primary}")
    PrimaryBase.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(
            insert(Adresse),
            [
                {"adresse_id": 1, "adresse_rue": "Rue Haute", "adresse_numero": "12", "adresse_cp": "1000", "adresse_pays": "PAYS_BELGIQUE"},
                {"adresse_id": 2, "adresse_rue": "Avenue du Port", "adresse_numero": "7", "adresse_cp": "1080", "adresse_pays": "France"},
                {"adresse_id": 3, "adresse_rue": "Chaussée de Mons", "adresse_numero": "", "adresse_cp": "7000", "adresse_pays": "PAYS_BELGIQUE"},
                {"adresse_id": 4, "adresse_rue": "Rue Cachée", "adresse_numero": "1", "adresse_cp": "5000", "adresse_pays": "PAYS_BELGIQUE"},
                {"adresse_id": 5, "adresse_rue": "Rue du Port", "adresse_numero": "3", "adresse_cp": "4000", "adresse_pays": None},
            ],
        )
        conn.execute(
            insert(Societe),
            [
                {"societe_id": 1, "societe_name": "Alpha Conseil", "societe_adresse_id": 1, "pack_id": 11, "societe_valid": 1, "societe_datecrea": datetime(2023, 6, 20, 9, 30)},
                {"societe_id": 2, "societe_name": "Beta Logistique", "societe_adresse_id": 2, "pack_id": 11, "societe_valid": 1, "societe_datecrea": datetime(2023, 1, 10, 14, 0)},
                {"societe_id": 3, "societe_name": "Gamma Services", "societe_adresse_id": 3, "pack_id": 11, "societe_valid": 1, "societe_datecrea": datetime(2023, 3, 5, 0, 0)},
                {"societe_id": 4, "societe_name": "Delta Hidden", "societe_adresse_id": 4, "pack_id": 12, "societe_valid": 1, "societe_datecrea": datetime(2023, 2, 1)},
                {"societe_id": 5, "societe_name": "Epsilon Invalid", "societe_adresse_id": 4, "pack_id": 11, "societe_valid": 0, "societe_datecrea": datetime(2023, 2, 2)},
                {"societe_id": 6, "societe_name": "Zeta Port", "societe_adresse_id": 5, "pack_id": 11, "societe_valid": 1, "societe_datecrea": datetime(2024, 2, 1, 8, 0)},
            ],
        )
        conn.execute(
            insert(SocieteUser),
            [
                {"user_id": 1, "user_societe_id": 1, "user_pname": "alice@alpha.be", "user_name": "alice", "user_phone": "0470 11 22 33", "user_compte": 1, "user_type": 1, "user_valid": 1},
                {"user_id": 2, "user_societe_id": 1, "user_pname": "bob@alpha.be", "user_name": "bob", "user_phone": "0470 99 99 99", "user_compte": 1, "user_type": 1, "user_valid": 1},
                {"user_id": 3, "user_societe_id": 2, "user_pname": "guest@beta.be", "user_name": "guest", "user_phone": "0480", "user_compte": 1, "user_type": 2, "user_valid": 1},
                {"user_id": 4, "user_societe_id": 2, "user_pname": None, "user_name": "ops@beta.be", "user_phone": None, "user_compte": 1, "user_type": 1, "user_valid": 1},
                {"user_id": 5, "user_societe_id": 3, "user_pname": "old@gamma.be", "user_name": "old", "user_phone": "0490", "user_compte": 1, "user_type": 1, "user_valid": 0},
            ],
        )
        conn.execute(
            insert(Facturation),
            [{"societe_id": 1}, {"societe_id": 1}, {"societe_id": 1}, {"societe_id": 2}]
            + [{"societe_id": 4}] * 5,
        )
        conn.execute(insert(Contact), [{"societe_id": 1}, {"societe_id": 1}, {"societe_id": 3}])
        conn.execute(
            insert(Entreprise),
            [
                {"societe_id": 1, "entreprise_valid": 1},
                {"societe_id": 1, "entreprise_valid": 1},
                {"societe_id": 1, "entreprise_valid": 0},
                {"societe_id": 2, "entreprise_valid": 1},
            ],
        )
        conn.execute(
            insert(FactureFournisseur),
            [
                {"societe_id": 1, "facture_fournisseur_valid": 1},
                {"societe_id": 1, "facture_fournisseur_valid": 0},
                {"societe_id": 3, "facture_fournisseur_valid": 1},
                {"societe_id": 3, "facture_fournisseur_valid": 1},
                {"societe_id": 5, "facture_fournisseur_valid": 1},
            ],
        )
    engine.dispose()

    engine2 = create_engine(f"sqlite:///{secondary}")
    SecondaryBase.metadata.create_all(engine2)
    with engine2.begin() as conn:
        conn.execute(insert(LegalUnit), [{"tenant_id": "1"}, {"tenant_id": "3"}])
    engine2.dispose()


@pytest.fixture
def store_paths(tmp_path: Path) -> Dict[str, Path]:
    """Paths of the two seeded SQLite stores."""
    primary = tmp_path / "primary.db"
    secondary = tmp_path / "legal_unit.db"
    seed_stores(primary, secondary)
    return {"primary": primary, "secondary": secondary}


def sqlite_settings(primary: Path, secondary: Path, **overrides) -> Settings:
    """Settings pointing both stores at SQLite files."""
    return Settings(
        DB_URL=f"sqlite+aiosqlite:///{primary}",
        DB2_URL=f"sqlite+aiosqlite:///{secondary}",
        **overrides,
    )


@pytest.fixture
def store_settings(store_paths: Dict[str, Path]) -> Settings:
    return sqlite_settings(store_paths["primary"], store_paths["secondary"])


@pytest_asyncio.fixture
async def seeded_db(store_settings: Settings):
    """A connected DatabaseManager over the seeded stores."""
    db = DatabaseManager(store_settings)
    await db.connect()
    yield db
    await db.disconnect()


class OfflineDatabaseManager(DatabaseManager):
    """A manager whose stores are never reachable."""

    async def connect(self) -> None:
        raise RepositoryError("Database unreachable")


# ========================= AUTH ==========================


@pytest.fixture(scope="session")
def credential_store() -> CredentialStore:
    """Built once: bcrypt hashing is deliberately slow."""
    return CredentialStore.from_settings()


@pytest.fixture
def auth_headers(credential_store: CredentialStore) -> Dict[str, str]:
    token = create_access_token(credential_store.user)
    return {"Authorization": f"Bearer {token}"}


# ========================= API ==========================


def _serve(db: DatabaseManager, credential_store: CredentialStore) -> Iterator[TestClient]:
    app.state.db = db
    app.state.credentials = credential_store
    try:
        # raise_server_exceptions=False so 500 envelopes can be asserted
        with TestClient(app, raise_server_exceptions=False) as client:
            yield client
    finally:
        del app.state.db
        del app.state.credentials


@pytest.fixture
def offline_client(credential_store: CredentialStore) -> Iterator[TestClient]:
    """TestClient whose database never connects: every read path uses fallback data."""
    yield from _serve(OfflineDatabaseManager(), credential_store)


@pytest.fixture
def store_client(store_settings: Settings, credential_store: CredentialStore) -> Iterator[TestClient]:
    """TestClient connected (inside its own event loop) to the seeded stores."""
    yield from _serve(DatabaseManager(store_settings), credential_store)


@pytest.fixture
def empty_store_client(tmp_path: Path, credential_store: CredentialStore) -> Iterator[TestClient]:
    """TestClient connected to reachable stores that hold no tables, so every query fails."""
    settings = sqlite_settings(tmp_path / "empty.db", tmp_path / "empty2.db")
    yield from _serve(DatabaseManager(settings), credential_store)


@pytest.fixture
def make_store_settings():
    """Factory for Settings over arbitrary SQLite files."""
    return sqlite_settings
