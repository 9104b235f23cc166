"""Tests for SearchRepository query composition (compiled with the PostgreSQL dialect)."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, literal, select

from omnisearch.application.dtos.search import IdentityContext, SearchContext, SearchFilters
from omnisearch.core.constants import ALL_MODELS
from omnisearch.domain.exceptions import PermissionClauseException
from omnisearch.infrastructure.persistence.repositories.search_repo import SearchRepository
from omnisearch.infrastructure.search import (
    CollectionPermissionProvider,
    PostgresIndexStore,
)

_legacy_metadata = MetaData()
report_card = Table(
    "report_card",
    _legacy_metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String),
)

USER_3 = IdentityContext(False, 5, frozenset({"/collection/3/"}))
SUPERUSER = IdentityContext(True, 1, frozenset())


def _legacy_source() -> MagicMock:
    legacy = MagicMock()
    legacy.full_search_query.side_effect = lambda params: select(
        literal("card").label("model"), report_card.c.id, report_card.c.name
    ).select_from(report_card)
    return legacy


def _repo(registry, db=None, default_limit=None, legacy=None) -> SearchRepository:
    return SearchRepository(
        db,
        index_store=PostgresIndexStore(),
        legacy_source=legacy or _legacy_source(),
        permissions=CollectionPermissionProvider(),
        scorers=registry,
        default_limit=default_limit,
    )


def test_fulltext_query_restricts_to_readable_collections(registry, sql) -> None:
    """A user with /collection/3/ only gets rows from collection 3."""
    rendered = sql(_repo(registry).fulltext_query(SearchContext("orders", identity=USER_3)))
    assert "LEFT OUTER JOIN collection ON search_index.collection_id = collection.id" in rendered
    assert "search_index.collection_id IN (3)" in rendered
    assert "IN (7)" not in rendered
    assert "AS total_score" in rendered
    assert rendered.rstrip().endswith(
        "ORDER BY total_score DESC, search_index.model, search_index.model_id"
    )


def test_fulltext_query_for_superuser_keeps_true_predicate(registry, sql) -> None:
    """Superusers still go through the join with a trivially true predicate."""
    rendered = sql(_repo(registry).fulltext_query(SearchContext("orders", identity=SUPERUSER)))
    assert "LEFT OUTER JOIN collection" in rendered
    assert "search_index.collection_id IN" not in rendered
    assert "false" not in rendered.split("WHERE", 1)[1]


def test_fulltext_query_applies_filters_and_personal_clause(registry, sql) -> None:
    """Filters and the personal-collections clause are ANDed after permissions."""
    ctx = SearchContext(
        "orders",
        identity=USER_3,
        filters=SearchFilters(created_by=frozenset({5}), personal_collections="exclude"),
    )
    rendered = sql(_repo(registry).fulltext_query(ctx))
    where = rendered.split("WHERE", 1)[1]
    assert where.index("search_index.collection_id IN (3)") < where.index("NOT IN (SELECT pc.id")
    assert "search_index.creator_id IN (5)" in where


def test_pagination(registry, sql) -> None:
    """Explicit limit/offset win; default_limit applies otherwise."""
    repo = _repo(registry, default_limit=50)
    rendered = sql(repo.fulltext_query(SearchContext("x", identity=USER_3, limit=10, offset=20)))
    assert "LIMIT 10 OFFSET 20" in rendered
    rendered = sql(repo.fulltext_query(SearchContext("x", identity=USER_3)))
    assert "LIMIT 50" in rendered
    assert "OFFSET" not in rendered


def test_unresolved_identity_fails_closed(registry) -> None:
    """Queries are never built without a resolved identity."""
    with pytest.raises(PermissionClauseException):
        _repo(registry).fulltext_query(SearchContext("orders"))


async def test_malformed_permission_never_executes(registry, fake_session) -> None:
    """A bad permission path aborts before the database is touched."""
    session = fake_session()
    repo = _repo(registry, db=session)
    ctx = SearchContext("orders", identity=IdentityContext(False, 5, frozenset({"/collection/x/"})))
    with pytest.raises(PermissionClauseException):
        await repo.stream_fulltext(ctx)
    assert session.statements == []


def test_hybrid_query_joins_legacy_rows_on_model_and_id(registry, sql) -> None:
    """Hybrid selects legacy rows joined to index matches on (model, model_id)."""
    legacy = _legacy_source()
    repo = _repo(registry, legacy=legacy)
    rendered = sql(repo.hybrid_query(SearchContext("orders", identity=USER_3)))
    assert "WITH " in rendered and "index_query AS" in rendered
    assert "source_query AS" in rendered
    assert "FROM source_query AS sq JOIN index_query AS iq ON " in rendered
    on_clause = rendered.split("JOIN index_query AS iq ON ", 1)[1].splitlines()[0]
    on_clause = on_clause.split("ORDER BY", 1)[0].strip()
    conditions = {frozenset(c.split(" = ")) for c in on_clause.split(" AND ")}
    assert conditions == {
        frozenset({"sq.model", "iq.model"}),
        frozenset({"CAST(sq.id AS VARCHAR)", "iq.model_id"}),
    }
    assert rendered.startswith("WITH ")
    assert "SELECT sq.model, sq.id, sq.name" in rendered
    assert "JOIN collection" not in rendered
    assert "total_score" not in rendered


def test_hybrid_query_passes_identity_to_legacy_source(registry, sql) -> None:
    """The legacy query receives the identity, term, models and filters."""
    legacy = _legacy_source()
    repo = _repo(registry, legacy=legacy)
    filters = SearchFilters(verified=True)
    repo.hybrid_query(
        SearchContext("orders", identity=USER_3, archived=False, filters=filters)
    )
    params = legacy.full_search_query.call_args.args[0]
    assert params["is_superuser"] is False
    assert params["current_user_id"] == 5
    assert params["current_user_perms"] == frozenset({"/collection/3/"})
    assert params["search_string"] == "orders"
    assert params["models"] == sorted(ALL_MODELS)
    assert params["archived"] is False
    assert params["model_ancestors"] is True
    assert params["filters"] is filters


def test_model_set_query_ignores_model_filter(registry, sql) -> None:
    """model_set considers every model but keeps permissions and filters."""
    ctx = SearchContext(
        "orders",
        identity=USER_3,
        models=frozenset({"card"}),
        filters=SearchFilters(verified=True),
    )
    rendered = sql(_repo(registry).model_set_query(ctx))
    assert rendered.startswith("SELECT DISTINCT search_index.model AS model")
    all_models = ", ".join(f"'{m}'" for m in sorted(ALL_MODELS))
    assert f"search_index.model IN ({all_models})" in rendered
    assert "search_index.collection_id IN (3)" in rendered
    assert "search_index.verified IS true" in rendered


async def test_stream_fulltext_yields_rows(registry, fake_session) -> None:
    """Rows are streamed from the session as mappings."""
    rows = [{"model": "card", "model_id": "1"}, {"model": "card", "model_id": "2"}]
    session = fake_session(rows=rows)
    repo = _repo(registry, db=session)
    stream = await repo.stream_fulltext(SearchContext("orders", identity=USER_3))
    assert len(session.statements) == 1
    assert [row async for row in stream] == rows
    assert session.results[0].closed


async def test_stream_closes_result_when_abandoned(registry, fake_session) -> None:
    """Stopping early still closes the streamed result."""
    rows = [{"model": "card", "model_id": str(i)} for i in range(3)]
    session = fake_session(rows=rows)
    repo = _repo(registry, db=session)
    stream = await repo.stream_hybrid(SearchContext("orders", identity=USER_3))
    assert (await anext(stream))["model_id"] == "0"
    assert not session.results[0].closed
    await stream.aclose()
    assert session.results[0].closed


async def test_model_set_executes_and_returns_set(registry, fake_session) -> None:
    """model_set returns a set of model names."""
    session = fake_session(scalars=["card", "dashboard", "card"])
    repo = _repo(registry, db=session)
    assert await repo.model_set(SearchContext("orders", identity=USER_3)) == {"card", "dashboard"}
