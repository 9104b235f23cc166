"""Tests for the lazy engine and session factory without a configured database."""

import pytest

from omnisearch.core.config import get_settings
from omnisearch.domain.exceptions import SqlNotConfiguredException
from omnisearch.infrastructure.persistence import database


@pytest.fixture
def unconfigured(monkeypatch):
    monkeypatch.setattr(database, "engine", None)
    monkeypatch.setattr(database, "AsyncSessionLocal", None)
    monkeypatch.setenv("DATABASE_URL", "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


async def test_get_db_requires_database_url(unconfigured) -> None:
    """get_db refuses to yield a session when DATABASE_URL is empty."""
    sessions = database.get_db()
    with pytest.raises(SqlNotConfiguredException):
        await anext(sessions)
    assert database.AsyncSessionLocal is None


def test_get_engine_requires_database_url(unconfigured) -> None:
    """get_engine raises instead of creating an engine without DATABASE_URL."""
    with pytest.raises(SqlNotConfiguredException):
        database.get_engine()
    assert database.engine is None
