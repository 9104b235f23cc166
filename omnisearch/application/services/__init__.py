"""Application services: identity resolution, readiness, rehydration, ranking."""

from omnisearch.application.services.identity_resolver import resolve_identity
from omnisearch.application.services.index_readiness import IndexReadinessGate
from omnisearch.application.services.ranking import (
    ScoringPolicy,
    no_scoring,
    total_score_scoring,
)
from omnisearch.application.services.rehydration import (
    rehydrate,
    rehydrate_legacy,
    score_breakdown,
)

__all__ = [
    "IndexReadinessGate",
    "ScoringPolicy",
    "no_scoring",
    "rehydrate",
    "rehydrate_legacy",
    "resolve_identity",
    "score_breakdown",
    "total_score_scoring",
]
