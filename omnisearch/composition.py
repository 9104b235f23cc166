"""Composition root: wires the Postgres implementations into SearchService.

The index lifecycle holds the process-wide readiness flag, so one instance
is shared (get_index_lifecycle); repositories and services are built per
session.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from omnisearch.application.use_cases.search import SearchService
from omnisearch.core.config import Settings, get_settings
from omnisearch.infrastructure.persistence.database import get_engine
from omnisearch.infrastructure.persistence.repositories import SearchRepository
from omnisearch.infrastructure.search import (
    CollectionPermissionProvider,
    PostgresIndexLifecycle,
    PostgresIndexStore,
    ScorerRegistry,
)
from omnisearch.shared.context import get_current_identity

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from omnisearch.application.interfaces import (
        AmbientIdentity,
        IIndexIngestion,
        IIndexLifecycle,
        ILegacySearchSource,
    )


@lru_cache
def get_index_lifecycle() -> PostgresIndexLifecycle:
    """Shared index lifecycle bound to the configured engine."""
    return PostgresIndexLifecycle(get_engine())


def build_scorer_registry(settings: Settings | None = None) -> ScorerRegistry:
    """Scorer registry from settings (raises UnknownScorerException on bad weights)."""
    settings = settings or get_settings()
    return ScorerRegistry(
        settings.search_weights,
        language=settings.search_text_language,
        recency_max_days=settings.search_recency_max_days,
        dashboard_count_ceiling=settings.search_dashboard_count_ceiling,
    )


def build_search_service(
    db: AsyncSession,
    legacy_source: ILegacySearchSource,
    ingestion: IIndexIngestion,
    lifecycle: IIndexLifecycle | None = None,
    ambient: AmbientIdentity | None = get_current_identity,
    settings: Settings | None = None,
) -> SearchService:
    """Search service over db using the Postgres index store and permissions.

    Args:
        db: Session the search queries run on.
        legacy_source: Renders hybrid results (applies its own permissions).
        ingestion: Writes entities into the index on init/reindex.
        lifecycle: Index lifecycle (defaults to the shared one).
        ambient: Request identity provider used when ctx has no user.
        settings: Overrides get_settings().

    Returns:
        A SearchService ready for search, model_set, init and reindex.
    """
    settings = settings or get_settings()
    registry = build_scorer_registry(settings)
    search_repo = SearchRepository(
        db,
        index_store=PostgresIndexStore(language=settings.search_text_language),
        legacy_source=legacy_source,
        permissions=CollectionPermissionProvider(),
        scorers=registry,
        default_limit=settings.search_default_limit,
    )
    return SearchService(
        search_repo,
        lifecycle=lifecycle or get_index_lifecycle(),
        ingestion=ingestion,
        registry=registry,
        ambient=ambient,
        settings=settings,
    )
