"""Persistence repositories. Re-exports for dependency injection."""

from omnisearch.infrastructure.persistence.repositories.search_repo import (
    SearchRepository,
)

__all__ = [
    "SearchRepository",
]
