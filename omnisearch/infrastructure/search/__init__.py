"""Postgres search index: query builder, permissions, scoring, filters, lifecycle."""

from omnisearch.infrastructure.search.filters import with_filters
from omnisearch.infrastructure.search.index_lifecycle import PostgresIndexLifecycle
from omnisearch.infrastructure.search.index_store import PostgresIndexStore
from omnisearch.infrastructure.search.permissions import CollectionPermissionProvider
from omnisearch.infrastructure.search.scoring import SCORER_NAMES, ScorerRegistry

__all__ = [
    "CollectionPermissionProvider",
    "PostgresIndexLifecycle",
    "PostgresIndexStore",
    "SCORER_NAMES",
    "ScorerRegistry",
    "with_filters",
]
