"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import trustypcs.models  # noqa: F401
from trustypcs.api.main import create_app
from trustypcs.config import AppSettings
from trustypcs.core.errors import SettingsStoreError
from trustypcs.core.settings_store import InMemorySettingsStore, SqlSettingsStore
from trustypcs.database import Base, make_engine


class BrokenSettingsStore(InMemorySettingsStore):
    """Store whose backend is down."""

    def get_settings(self):
        raise SettingsStoreError("database unavailable")

    def update_settings(self, updates):
        raise SettingsStoreError("database unavailable")


@pytest.fixture
def memory_store():
    return InMemorySettingsStore()


@pytest.fixture
def sql_engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'settings.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sql_engine):
    return SqlSettingsStore(sessionmaker(autocommit=False, autoflush=False, bind=sql_engine))


@pytest.fixture
def client(memory_store):
    return TestClient(create_app(store=memory_store, config=AppSettings()))


@pytest.fixture
def sql_client(sql_store):
    return TestClient(create_app(store=sql_store, config=AppSettings()))


@pytest.fixture
def guarded_config():
    return AppSettings(SETTINGS_WRITE_REQUIRES_ADMIN=True, SECRET_KEY="test-secret")


@pytest.fixture
def guarded_client(memory_store, guarded_config):
    return TestClient(create_app(store=memory_store, config=guarded_config))


@pytest.fixture
def broken_client():
    return TestClient(create_app(store=BrokenSettingsStore(), config=AppSettings()))
