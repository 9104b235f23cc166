"""Pytest configuration and fixtures for omnisearch.

DB-dependent fixtures use omnisearch.infrastructure.persistence.database;
unit tests use the fakes below and never touch a database.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from omnisearch.core.config import DEFAULT_SEARCH_WEIGHTS, Settings
from omnisearch.infrastructure.persistence import database
from omnisearch.infrastructure.search.scoring import ScorerRegistry


def compile_sql(stmt: Any) -> str:
    """Render a statement as PostgreSQL SQL with literal parameters inlined."""
    return str(
        stmt.compile(
            dialect=postgresql.dialect(),
            compile_kwargs={"literal_binds": True},
        )
    )


class FakeStreamResult:
    """Stand-in for AsyncResult: mappings() is async-iterable."""

    def __init__(self, rows: Iterable[Mapping[str, Any]]) -> None:
        self._rows = list(rows)
        self.closed = False

    def mappings(self) -> "FakeStreamResult":
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for row in self._rows:
            yield row

    async def close(self) -> None:
        self.closed = True


class FakeScalarResult:
    """Stand-in for Result with scalars().all()."""

    def __init__(self, values: Iterable[Any]) -> None:
        self._values = list(values)

    def scalars(self) -> "FakeScalarResult":
        return self

    def all(self) -> list[Any]:
        return list(self._values)


class FakeSession:
    """Records executed statements and replays canned rows."""

    def __init__(
        self,
        rows: Iterable[Mapping[str, Any]] = (),
        scalars: Iterable[Any] = (),
    ) -> None:
        self.rows = list(rows)
        self.scalar_values = list(scalars)
        self.statements: list[Any] = []
        self.results: list[FakeStreamResult] = []

    async def stream(self, stmt: Any) -> FakeStreamResult:
        self.statements.append(stmt)
        result = FakeStreamResult(self.rows)
        self.results.append(result)
        return result

    async def execute(self, stmt: Any) -> FakeScalarResult:
        self.statements.append(stmt)
        return FakeScalarResult(self.scalar_values)


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment (no database)."""
    return Settings(_env_file=None, database_url="")


@pytest.fixture
def registry() -> ScorerRegistry:
    """Scorer registry with the default weights."""
    return ScorerRegistry(DEFAULT_SEARCH_WEIGHTS)


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL (postgresql+asyncpg://...). Skips (pytest.skip)
    when Postgres is not configured. Use @pytest.mark.requires_db to mark
    tests that need this fixture; run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip("Postgres not configured: set DATABASE_URL")
    async for session in database.get_db():
        yield session
        await session.rollback()


@pytest.fixture
def sql():
    """compile_sql as a fixture: sql(stmt) -> PostgreSQL text."""
    return compile_sql


@pytest.fixture
def fake_session():
    """Factory for FakeSession(rows=..., scalars=...)."""
    return FakeSession
