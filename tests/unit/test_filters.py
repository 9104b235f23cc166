"""Tests for ad-hoc search filters."""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from omnisearch.application.dtos.search import DateRange, SearchContext, SearchFilters
from omnisearch.infrastructure.persistence.models.search_index import search_index
from omnisearch.infrastructure.search.filters import with_filters

BASE = select(search_index.c.model)


def test_no_filters_leaves_statement_untouched() -> None:
    """Without filters the statement is returned as is."""
    assert with_filters(SearchContext("x"), BASE) is BASE


def test_id_and_user_filters(sql) -> None:
    """Creator, editor, database, verified and id filters become WHERE clauses."""
    ctx = SearchContext(
        "x",
        filters=SearchFilters(
            created_by=frozenset({2, 1}),
            last_edited_by=frozenset({4}),
            verified=True,
            table_db_id=9,
            ids=frozenset({10, 11}),
        ),
    )
    rendered = sql(with_filters(ctx, BASE))
    assert "search_index.creator_id IN (1, 2)" in rendered
    assert "search_index.last_editor_id IN (4)" in rendered
    assert "search_index.verified IS true" in rendered
    assert "search_index.database_id = 9" in rendered
    assert "search_index.model_id IN ('10', '11')" in rendered


def test_date_ranges_are_half_open() -> None:
    """Ranges include start and exclude end; open sides add nothing."""
    start = datetime(2024, 1, 1, tzinfo=UTC)
    end = datetime(2024, 2, 1, tzinfo=UTC)
    ctx = SearchContext(
        "x",
        filters=SearchFilters(
            created_at=DateRange(start, end),
            last_edited_at=DateRange(start=None, end=end),
        ),
    )
    compiled = with_filters(ctx, BASE).compile(dialect=postgresql.dialect())
    rendered = str(compiled)
    assert "search_index.created_at >= " in rendered
    assert "search_index.created_at < " in rendered
    assert "search_index.last_edited_at < " in rendered
    assert "search_index.last_edited_at >= " not in rendered
    assert start in compiled.params.values()
    assert end in compiled.params.values()
