"""Persistence models: search index table and the collection table it joins."""

from omnisearch.infrastructure.persistence.models.collection import Collection
from omnisearch.infrastructure.persistence.models.search_index import (
    build_search_index_table,
    search_index,
)

__all__ = [
    "Collection",
    "build_search_index_table",
    "search_index",
]
