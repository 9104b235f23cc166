"""Application use cases: one entry point per workflow."""

from omnisearch.application.use_cases.search import SearchService

__all__ = [
    "SearchService",
]
