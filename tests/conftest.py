"""Shared fixtures: temporary SQLite store, principal registry and API client."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Garante que o pacote cashcard seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cashcard.core import config as core_config  # noqa: E402
from cashcard.db import models  # noqa: E402
from cashcard.db import session as db_session  # noqa: E402
from cashcard.db.seed import seed_cards  # noqa: E402
from cashcard.repositories.sql_repository import CashCardRepository  # noqa: E402
from cashcard.services.identity_service import DEMO_PRINCIPALS, PrincipalRegistry  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session.default_session_factory.cache_clear()


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Configura um SQLite temporário e reseta caches de settings/engine."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("AUTO_CREATE_SCHEMA", "0")
    monkeypatch.delenv("CASHCARD_PRINCIPALS_FILE", raising=False)
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _clear_caches()


@pytest.fixture()
def repo(temp_db):
    return CashCardRepository()


@pytest.fixture()
def seeded_repo(repo):
    seed_cards(repo)
    return repo


@pytest.fixture(scope="session")
def registry():
    # argon2: hashed once per session
    return PrincipalRegistry.from_plaintext(DEMO_PRINCIPALS)


@pytest.fixture()
def client(seeded_repo, registry):
    from fastapi.testclient import TestClient

    from cashcard.app import create_app
    from cashcard.core.config import get_settings

    app = create_app(get_settings(), registry=registry, repository=seeded_repo)
    with TestClient(app) as test_client:
        yield test_client
