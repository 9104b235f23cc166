"""Ad-hoc search filters applied to index queries after permissions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, Select, Table

from omnisearch.infrastructure.persistence.models.search_index import search_index

if TYPE_CHECKING:
    from omnisearch.application.dtos.search import DateRange, SearchContext


def _in_range(column: ColumnElement[Any], date_range: DateRange) -> list[ColumnElement[bool]]:
    clauses = []
    if date_range.start is not None:
        clauses.append(column >= date_range.start)
    if date_range.end is not None:
        clauses.append(column < date_range.end)
    return clauses


def with_filters(ctx: SearchContext, stmt: Select, table: Table = search_index) -> Select:
    """Add a WHERE clause for every filter set on ctx.filters.

    Rows whose filtered column is NULL (e.g. tables have no creator) never
    match a filter on that column.
    """
    f = ctx.filters
    t = table
    clauses: list[ColumnElement[bool]] = []
    if f.created_by is not None:
        clauses.append(t.c.creator_id.in_(sorted(f.created_by)))
    if f.last_edited_by is not None:
        clauses.append(t.c.last_editor_id.in_(sorted(f.last_edited_by)))
    if f.created_at is not None:
        clauses.extend(_in_range(t.c.created_at, f.created_at))
    if f.last_edited_at is not None:
        clauses.extend(_in_range(t.c.last_edited_at, f.last_edited_at))
    if f.verified is not None:
        clauses.append(t.c.verified.is_(f.verified))
    if f.table_db_id is not None:
        clauses.append(t.c.database_id == f.table_db_id)
    if f.ids is not None:
        # model_id is stored as text (some models have composite ids).
        clauses.append(t.c.model_id.in_(sorted(str(i) for i in f.ids)))
    if clauses:
        stmt = stmt.where(*clauses)
    return stmt
