"""Search use case: strategy dispatch and index lifecycle entry points.

Delegates query composition to ISearchRepository and table management to
IIndexLifecycle / IIndexIngestion.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from typing import TYPE_CHECKING, Any

from omnisearch.application.dtos.search import ScoredResult, ScoringOutcome
from omnisearch.application.services.identity_resolver import resolve_identity
from omnisearch.application.services.index_readiness import IndexReadinessGate
from omnisearch.application.services.ranking import total_score_scoring
from omnisearch.application.services.rehydration import rehydrate, rehydrate_legacy
from omnisearch.core.config import get_settings
from omnisearch.domain.enums import SearchEngine
from omnisearch.domain.exceptions import (
    MalformedLegacyPayloadException,
    ValidationException,
)
from omnisearch.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    current_trace_context,
    detached_span,
    traced,
)

if TYPE_CHECKING:
    from omnisearch.application.dtos.search import SearchContext
    from omnisearch.application.interfaces.repositories import ISearchRepository
    from omnisearch.application.interfaces.services import (
        AmbientIdentity,
        IIndexIngestion,
        IIndexLifecycle,
        IScorerRegistry,
    )
    from omnisearch.application.services.ranking import ScoringPolicy
    from omnisearch.core.config import Settings

logger = logging.getLogger(__name__)

MALFORMED_POLICY_SKIP = "skip"


def _validate_pagination(ctx: SearchContext) -> None:
    if ctx.limit is not None and ctx.limit < 0:
        raise ValidationException("limit must be >= 0", field="limit")
    if ctx.offset is not None and ctx.offset < 0:
        raise ValidationException("offset must be >= 0", field="offset")


class SearchService:
    """Permission-filtered, ranked search over the index.

    search() resolves the caller identity, checks the readiness gate and
    dispatches to the fulltext or hybrid strategy. init() and reindex()
    manage the index tables.
    """

    def __init__(
        self,
        search_repo: ISearchRepository,
        lifecycle: IIndexLifecycle,
        ingestion: IIndexIngestion,
        registry: IScorerRegistry,
        ambient: AmbientIdentity | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.search_repo = search_repo
        self.lifecycle = lifecycle
        self.ingestion = ingestion
        self.registry = registry
        self.ambient = ambient
        self.settings = settings or get_settings()
        self.gate = IndexReadinessGate(lifecycle)

    def _prepare(self, ctx: SearchContext) -> SearchContext:
        _validate_pagination(ctx)
        return ctx.with_identity(resolve_identity(ctx.identity, self.ambient))

    def resolve_engine(self, ctx: SearchContext) -> SearchEngine:
        """Strategy for ctx; falls back to the configured default engine."""
        default = SearchEngine(self.settings.search_default_engine)
        return SearchEngine.resolve(ctx.search_engine, default)

    @traced("search.search")
    async def search(self, ctx: SearchContext) -> AsyncIterator[ScoredResult]:
        """Run a search and return its results as an async iterator.

        Gate, identity and query errors are raised on await; rows are
        fetched lazily while iterating.

        Args:
            ctx: Search request. An identity without current_user_id is
                replaced by the ambient (or unrestricted) identity.

        Returns:
            Async iterator of ScoredResult, best first for fulltext.

        Raises:
            IndexNotReadyException: init() has not completed yet.
            ValidationException: negative limit or offset.
            PermissionClauseException: permission paths cannot be interpreted.
        """
        engine = self.resolve_engine(ctx)
        add_span_attributes(
            search_engine=engine.value,
            limit=ctx.limit,
            offset=ctx.offset,
            archived=ctx.archived,
        )
        self.gate.ensure_ready(engine.value)
        ctx = self._prepare(ctx)
        logger.debug("Searching with engine %s", engine.value)
        # Rows stream after this span ends; their span is parented on it.
        parent = current_trace_context()
        if engine is SearchEngine.HYBRID:
            rows = await self.search_repo.stream_hybrid(ctx)
            return self._rehydrate_legacy_rows(rows, parent)
        rows = await self.search_repo.stream_fulltext(ctx)
        return self._rehydrate_rows(rows, parent)

    async def _rehydrate_rows(
        self, rows: AsyncIterator[Mapping[str, Any]], parent: Any = None
    ) -> AsyncIterator[ScoredResult]:
        skip = self.settings.search_malformed_payload_policy == MALFORMED_POLICY_SKIP
        with detached_span("search.rows", parent, {"search_engine": "fulltext"}) as span:
            count = 0
            async for row in rows:
                try:
                    result = rehydrate(row, self.registry)
                except MalformedLegacyPayloadException as e:
                    if not skip:
                        raise
                    logger.warning(
                        "Skipping search result %s %s: %s",
                        e.details.get("model"),
                        e.details.get("model_id"),
                        e.details.get("reason"),
                    )
                    add_span_event(
                        "search.row_skipped",
                        {"model": str(e.details.get("model"))},
                        span=span,
                    )
                    continue
                count += 1
                yield result
            span.set_attribute("search.row_count", count)

    async def _rehydrate_legacy_rows(
        self, rows: AsyncIterator[Mapping[str, Any]], parent: Any = None
    ) -> AsyncIterator[ScoredResult]:
        with detached_span("search.rows", parent, {"search_engine": "hybrid"}) as span:
            count = 0
            async for row in rows:
                count += 1
                yield rehydrate_legacy(row)
            span.set_attribute("search.row_count", count)

    async def ranked(
        self,
        ctx: SearchContext,
        policy: ScoringPolicy = total_score_scoring,
        scoring_ctx: Any = None,
    ) -> list[ScoringOutcome]:
        """Collect search results and order them by a scoring policy.

        The sort is stable, so results the policy scores equally keep the
        order the strategy produced.
        """
        results = await self.search(ctx)
        outcomes = [policy(result, scoring_ctx) async for result in results]
        outcomes.sort(key=lambda o: o.score, reverse=True)
        return outcomes

    @traced("search.model_set")
    async def model_set(self, ctx: SearchContext) -> set[str]:
        """Return every model with at least one visible match for ctx.

        Any model filter on ctx is ignored; everything else applies.
        """
        self.gate.ensure_ready()
        ctx = self._prepare(ctx)
        return await self.search_repo.model_set(ctx)

    @traced("search.init")
    async def init(self, force_reset: bool = False) -> None:
        """Create the index if needed (dropping it first when force_reset) and populate it."""
        add_span_attributes(force_reset=force_reset)
        logger.info("Initializing search index (force_reset=%s)", force_reset)
        await self.lifecycle.ensure_ready(force_reset)
        await self.ingestion.populate_index()
        logger.info("Search index initialized")

    @traced("search.reindex")
    async def reindex(self) -> None:
        """Rebuild the index into a pending table and swap it in.

        Searches keep reading the active index until the swap.
        """
        logger.info("Reindexing search index")
        await self.lifecycle.ensure_ready(False)
        await self.lifecycle.maybe_create_pending()
        await self.ingestion.populate_index()
        await self.lifecycle.activate_pending()
        logger.info("Search index reindexed")
