"""Pytest configuration and fixtures for tests."""

import pytest
from fastapi.testclient import TestClient

from client_registry.config import Settings, StoreConfig
from client_registry.database import build_engine, create_tables
from client_registry.main import create_app
from client_registry.services.record_store import RecordStore

MEMORY_URL = "sqlite://"


@pytest.fixture
def engine():
    """Create a fresh in-memory SQLite database for each test."""
    engine = build_engine(StoreConfig(database_url=MEMORY_URL))
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> RecordStore:
    return RecordStore(engine)


@pytest.fixture
def app(store):
    """Application whose endpoint talks to the per-test store."""
    return create_app(
        Settings(database_url=MEMORY_URL, _env_file=None), record_store=store
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
