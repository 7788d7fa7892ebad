"""
Shared fixtures: an in-memory SQLite database per test
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from knowledge_base.api.dependencies import get_data_store
from knowledge_base.core.config import Settings
from knowledge_base.core.database import build_engine, create_tables, dispose_engine
from knowledge_base.database.data_store import DataStore
from knowledge_base.main import app


class StepClock:
    """Returns a strictly increasing timestamp on every call"""

    def __init__(self, start=None, step=timedelta(minutes=1)):
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        now = self.current
        self.current += self.step
        return now


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, POSTGRES_URL="sqlite://")


@pytest.fixture
def engine(test_settings):
    engine = build_engine(test_settings.postgres_url, test_settings)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(engine, clock):
    return DataStore(engine, atomic_upsert=True, clock=clock)


@pytest.fixture(params=[True, False], ids=["atomic_upsert", "read_then_write"])
def chat_store(request, engine, clock):
    """DataStore exercised with both chat write strategies"""
    return DataStore(engine, atomic_upsert=request.param, clock=clock)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_data_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_process_engine():
    yield
    dispose_engine()
