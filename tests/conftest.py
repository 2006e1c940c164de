from __future__ import annotations

from typing import Iterator

import pytest

from blog_shared.config import SharedSettings, get_settings
from blog_shared.db import client as db_client
from blog_shared.db.client import PostgresClient, init_db
from blog_shared.documents import client as documents_client
from blog_shared.documents.client import MongoClientManager
from tests.fakes.mongo import FakeClientFactory

SETTINGS_ENV_VARS = [
    "SERVICE_NAME", "ENVIRONMENT", "ENV", "LOG_LEVEL", "LOG_FORMAT",
    "DATABASE_URL", "DATABASE__URL", "DB_POOL_SIZE", "DB_MAX_OVERFLOW",
    "DB_POOL_TIMEOUT", "MONGODB_URI", "MONGODB__URI", "MONGODB_DATABASE",
    "MONGODB__DATABASE", "MONGODB_MAX_POOL_SIZE", "MONGODB_MIN_POOL_SIZE",
    "MONGODB_SOCKET_TIMEOUT_MS", "MONGODB_SERVER_SELECTION_TIMEOUT_MS",
]

MONGODB_TEST_URI = "mongodb://localhost:27017/blog_test"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Run every test without a .env file or store settings from the host."""
    # Disable .env file loading by changing to a temp directory
    monkeypatch.chdir(tmp_path)
    for var in SETTINGS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sqlite_settings() -> SharedSettings:
    """Settings pointing the relational client at an in-memory SQLite database."""
    return SharedSettings(database_url="sqlite://")


@pytest.fixture
def pg_client(sqlite_settings) -> Iterator[PostgresClient]:
    """Open client with every table created."""
    client = PostgresClient(sqlite_settings)
    init_db(client)
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def default_pg_client(monkeypatch: pytest.MonkeyPatch, sqlite_settings) -> Iterator[PostgresClient]:
    """Replace the process-wide relational client with a SQLite-backed one."""
    client = PostgresClient(sqlite_settings)
    monkeypatch.setattr(db_client, "_default_client", client)
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def mongo_settings() -> SharedSettings:
    return SharedSettings(mongodb_uri=MONGODB_TEST_URI)


@pytest.fixture
def mongo_factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def mongo_manager(mongo_settings, mongo_factory) -> MongoClientManager:
    """Manager wired to the in-memory Motor fake (not yet connected)."""
    return MongoClientManager(mongo_settings, client_factory=mongo_factory)


@pytest.fixture
def default_mongo_manager(monkeypatch: pytest.MonkeyPatch, mongo_manager) -> MongoClientManager:
    """Replace the process-wide document manager with the fake-backed one."""
    monkeypatch.setattr(documents_client, "_default_manager", mongo_manager)
    return mongo_manager
