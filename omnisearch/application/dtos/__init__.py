"""Application DTOs (no ORM dependency)."""

from omnisearch.application.dtos.search import (
    DateRange,
    IdentityContext,
    ScoredResult,
    ScoreEntry,
    ScoringOutcome,
    SearchContext,
    SearchFilters,
)

__all__ = [
    "DateRange",
    "IdentityContext",
    "ScoreEntry",
    "ScoredResult",
    "ScoringOutcome",
    "SearchContext",
    "SearchFilters",
]
