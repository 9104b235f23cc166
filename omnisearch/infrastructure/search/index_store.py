"""Query builder for the Postgres search index (implements IIndexStore)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, Table, select

from omnisearch.core.constants import ALL_MODELS, MODELS_REQUIRING_USER
from omnisearch.infrastructure.persistence.models.search_index import search_index
from omnisearch.infrastructure.search.tsquery import tsquery_clause

if TYPE_CHECKING:
    from omnisearch.application.dtos.search import IdentityContext, SearchContext

# Columns selected by the full projection. search_vector and searchable_text
# stay in the database: they are match inputs, not result fields.
FULL_PROJECTION_COLUMNS = (
    "model",
    "model_id",
    "model_rank",
    "name",
    "legacy_input",
    "collection_id",
    "database_id",
    "archived",
    "pinned",
    "verified",
    "dashboardcard_count",
    "creator_id",
    "last_editor_id",
    "created_at",
    "updated_at",
    "last_edited_at",
)


class PostgresIndexStore:
    """Builds composable SELECTs over matching index rows.

    Ranking internals belong to Postgres; this class only supplies the
    tsquery and the model/archived filters. The result is a plain Select,
    usable directly or as a CTE/subquery.
    """

    def __init__(self, language: str = "english", table: Table = search_index) -> None:
        self.language = language
        self.table = table

    def search_models(
        self, ctx: SearchContext, identity: IdentityContext
    ) -> frozenset[str]:
        """Return ctx.models, or all models (minus user-only ones without a caller id)."""
        if ctx.models is not None:
            return frozenset(ctx.models)
        if identity.current_user_id is None:
            return ALL_MODELS - MODELS_REQUIRING_USER
        return ALL_MODELS

    def search_query(
        self,
        search_term: str,
        ctx: SearchContext,
        identity: IdentityContext,
        projection: Sequence[Any] | None = None,
    ) -> Select:
        """Return SELECT <projection> FROM search_index WHERE <match and filters>.

        Args:
            search_term: User text; blank matches every row.
            ctx: Search context (models, archived).
            identity: Resolved caller identity (drives the default model set).
            projection: None for the full row, else explicit column expressions.
        """
        t = self.table
        if projection is None:
            columns = [t.c[name] for name in FULL_PROJECTION_COLUMNS]
        else:
            columns = list(projection)
        stmt = select(*columns).select_from(t)

        query = tsquery_clause(search_term, self.language)
        if query is not None:
            stmt = stmt.where(t.c.search_vector.bool_op("@@")(query))

        stmt = stmt.where(t.c.model.in_(sorted(self.search_models(ctx, identity))))
        if ctx.archived is not None:
            stmt = stmt.where(t.c.archived.is_(ctx.archived))
        return stmt
