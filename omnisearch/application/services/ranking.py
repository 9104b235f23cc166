"""Scoring policies applied to rehydrated results by callers that rank them."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Protocol

from omnisearch.application.dtos.search import ScoredResult, ScoringOutcome


class ScoringPolicy(Protocol):
    """Assigns a final score to one result."""

    def __call__(self, result: ScoredResult, scoring_ctx: Any) -> ScoringOutcome:
        ...


def total_score_scoring(result: ScoredResult, scoring_ctx: Any) -> ScoringOutcome:
    """Rank by the score the index computed (0 when there is none)."""
    return ScoringOutcome(score=result.total_score or 0.0, result=result)


def no_scoring(result: ScoredResult, scoring_ctx: Any) -> ScoringOutcome:
    """Do no scoring whatsoever.

    Reports total_score when present (1 otherwise) and keeps the existing
    breakdown in all_scores, unchanged.
    """
    score = result.total_score if result.total_score is not None else 1
    return ScoringOutcome(score=score, result=replace(result, all_scores=result.scores))
