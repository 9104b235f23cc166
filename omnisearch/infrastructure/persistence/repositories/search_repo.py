"""Full-text search repository. Composes and runs queries over the search index.

Two strategies share one index query builder:

- fulltext: index rows, collection join + permission predicates, scorer
  columns and total_score, ad-hoc filters.
- hybrid: the index narrows candidates (CTE ``index_query``) and the legacy
  query renders them (CTE ``source_query``), joined on (model, model_id).
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, String, Table, and_, cast, distinct, literal_column, select
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncResult, AsyncSession

from omnisearch.core.constants import ALL_MODELS, score_column
from omnisearch.domain.exceptions import PermissionClauseException
from omnisearch.infrastructure.persistence.models.collection import Collection
from omnisearch.infrastructure.persistence.models.search_index import search_index
from omnisearch.infrastructure.search.filters import with_filters

if TYPE_CHECKING:
    from omnisearch.application.dtos.search import IdentityContext, SearchContext
    from omnisearch.application.interfaces.services import (
        IIndexStore,
        ILegacySearchSource,
        IPermissionProvider,
    )
    from omnisearch.infrastructure.search.scoring import ScorerRegistry

logger = logging.getLogger(__name__)


def _identity(ctx: SearchContext) -> IdentityContext:
    if ctx.identity is None:
        # Fail closed: never default to an unrestricted identity here.
        raise PermissionClauseException("Search context has no resolved identity")
    return ctx.identity


async def _iter_mappings(result: AsyncResult) -> AsyncIterator[RowMapping]:
    try:
        async for row in result.mappings():
            yield row
    finally:
        # Release the server-side cursor even when the caller stops early.
        await result.close()


class SearchRepository:
    """Builds and executes search queries (implements ISearchRepository).

    Query builders are public so callers (and tests) can inspect the SQL;
    the stream_* methods build eagerly and stream rows lazily.
    """

    def __init__(
        self,
        db: AsyncSession,
        index_store: IIndexStore,
        legacy_source: ILegacySearchSource,
        permissions: IPermissionProvider,
        scorers: ScorerRegistry,
        default_limit: int | None = None,
        table: Table = search_index,
        collection_table: Table = Collection.__table__,
    ) -> None:
        self.db = db
        self.index_store = index_store
        self.legacy_source = legacy_source
        self.permissions = permissions
        self.scorers = scorers
        self.default_limit = default_limit
        self.table = table
        self.collection_table = collection_table

    def add_collection_join_and_where_clauses(
        self, ctx: SearchContext, stmt: Select
    ) -> Select:
        """Join collection and restrict rows to collections the caller may read.

        Order: LEFT JOIN collection, then the permitted predicate, then the
        optional personal-collections predicate, all ANDed.
        """
        identity = _identity(ctx)
        collection_id = self.table.c.collection_id
        permitted = self.permissions.permitted_clause(identity, collection_id)
        personal = self.permissions.personal_clause(ctx, identity, collection_id)
        stmt = stmt.outerjoin(
            self.collection_table, collection_id == self.collection_table.c.id
        ).where(permitted)
        if personal is not None:
            stmt = stmt.where(personal)
        return stmt

    def _paginate(self, ctx: SearchContext, stmt: Select) -> Select:
        limit = ctx.limit if ctx.limit is not None else self.default_limit
        if limit is not None:
            stmt = stmt.limit(limit)
        if ctx.offset:
            stmt = stmt.offset(ctx.offset)
        return stmt

    def fulltext_query(self, ctx: SearchContext) -> Select:
        """Index rows (full projection), permission-filtered, scored, filtered, ranked."""
        identity = _identity(ctx)
        t = self.table
        stmt = self.index_store.search_query(ctx.search_term, ctx, identity)
        stmt = self.add_collection_join_and_where_clauses(ctx, stmt)
        stmt = self.scorers.with_scores(ctx, stmt)
        stmt = with_filters(ctx, stmt, t)
        stmt = stmt.order_by(
            literal_column("total_score").desc(), t.c.model, t.c.model_id
        )
        return self._paginate(ctx, stmt)

    def legacy_params(
        self, ctx: SearchContext, identity: IdentityContext
    ) -> dict[str, Any]:
        """Parameters handed to the legacy query (it applies its own permissions)."""
        return {
            "is_superuser": identity.is_superuser,
            "current_user_id": identity.current_user_id,
            "current_user_perms": identity.current_user_perms,
            "search_string": ctx.search_term,
            "models": sorted(self.index_store.search_models(ctx, identity)),
            "archived": ctx.archived,
            "model_ancestors": True,
            "filters": ctx.filters,
        }

    def hybrid_query(self, ctx: SearchContext) -> Select:
        """SELECT sq.* FROM source_query sq JOIN index_query iq ON (model, id)."""
        identity = _identity(ctx)
        t = self.table
        text_column = score_column("text")
        text_score = self.scorers.scorers(ctx.search_term)["text"].label(text_column)
        index_query = self.index_store.search_query(
            ctx.search_term,
            ctx,
            identity,
            projection=[t.c.model, t.c.model_id, text_score],
        ).cte("index_query")
        source_query = self.legacy_source.full_search_query(
            self.legacy_params(ctx, identity)
        ).cte("source_query")
        sq = source_query.alias("sq")
        iq = index_query.alias("iq")
        stmt = (
            select(sq)
            .join(
                iq,
                and_(
                    sq.c.model == iq.c.model,
                    # model_id is text in the index; legacy ids are usually integers.
                    cast(sq.c.id, String) == iq.c.model_id,
                ),
            )
            .order_by(iq.c[text_column].desc(), sq.c.model, sq.c.id)
        )
        return self._paginate(ctx, stmt)

    def model_set_query(self, ctx: SearchContext) -> Select:
        """Distinct visible models for ctx, ignoring any model filter."""
        ctx = ctx.with_models(ALL_MODELS)
        identity = _identity(ctx)
        t = self.table
        stmt = self.index_store.search_query(
            ctx.search_term,
            ctx,
            identity,
            projection=[distinct(t.c.model).label("model")],
        )
        stmt = self.add_collection_join_and_where_clauses(ctx, stmt)
        return with_filters(ctx, stmt, t)

    async def stream_fulltext(
        self, ctx: SearchContext
    ) -> AsyncIterator[Mapping[str, Any]]:
        """Run the fulltext query; rows are streamed lazily."""
        result = await self.db.stream(self.fulltext_query(ctx))
        return _iter_mappings(result)

    async def stream_hybrid(
        self, ctx: SearchContext
    ) -> AsyncIterator[Mapping[str, Any]]:
        """Run the hybrid query; rows are streamed lazily."""
        result = await self.db.stream(self.hybrid_query(ctx))
        return _iter_mappings(result)

    async def model_set(self, ctx: SearchContext) -> set[str]:
        """Return the set of models with at least one visible match."""
        result = await self.db.execute(self.model_set_query(ctx))
        models = set(result.scalars().all())
        logger.debug("Model set for search: %s", sorted(models))
        return models
