"""omnisearch: permission-aware search over a Postgres full-text index.

Entry point is omnisearch.application.use_cases.search.SearchService; build
one with omnisearch.composition.build_search_service.
"""

__version__ = "1.0.0"
