"""Scorer registry and weighted-sum scoring pushed into the index query.

Each scorer is a per-row SQL expression normalized to roughly [0, 1].
with_scores() selects every scorer as <name>_score plus
total_score = sum(weight * score), so ranking happens in Postgres.
"""

from __future__ import annotations

import functools
import logging
import operator
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    ColumnElement,
    Float,
    Select,
    Table,
    case,
    cast,
    extract,
    func,
    literal,
)

from omnisearch.core.constants import MODEL_RANKING, score_column
from omnisearch.domain.exceptions import UnknownScorerException
from omnisearch.infrastructure.persistence.models.search_index import search_index
from omnisearch.infrastructure.search.tsquery import tsquery_clause

if TYPE_CHECKING:
    from omnisearch.application.dtos.search import SearchContext

logger = logging.getLogger(__name__)

# Fixed registry order; the score breakdown of every result follows it.
SCORER_NAMES: tuple[str, ...] = (
    "text",
    "pinned",
    "recency",
    "dashboard",
    "model",
    "verified",
)

_SECONDS_PER_DAY = 86400.0


class ScorerRegistry:
    """Named scorers over the index table with their configured weights.

    Weights are validated at construction: every scorer needs a weight and
    every weight needs a scorer (fail fast on configuration drift).
    """

    def __init__(
        self,
        weights: Mapping[str, float],
        language: str = "english",
        recency_max_days: int = 180,
        dashboard_count_ceiling: int = 10,
        table: Table = search_index,
    ) -> None:
        for name in SCORER_NAMES:
            if name not in weights:
                raise UnknownScorerException(name)
        for name in weights:
            if name not in SCORER_NAMES:
                raise UnknownScorerException(name, "weight configured for unregistered scorer")
        self._weights = {name: float(weights[name]) for name in SCORER_NAMES}
        self.language = language
        self.recency_max_days = recency_max_days
        self.dashboard_count_ceiling = dashboard_count_ceiling
        self.table = table

    def names(self) -> tuple[str, ...]:
        return SCORER_NAMES

    def weight(self, name: str) -> float:
        try:
            return self._weights[name]
        except KeyError:
            raise UnknownScorerException(name) from None

    def scorers(self, search_term: str) -> dict[str, ColumnElement[Any]]:
        """Ordered mapping of scorer name to its per-row score expression."""
        t = self.table
        query = tsquery_clause(search_term, self.language)
        if query is None:
            text_score = literal(0.0, Float)
        else:
            text_score = func.ts_rank(t.c.search_vector, query, type_=Float)

        age = func.now() - func.coalesce(t.c.updated_at, t.c.created_at)
        age_days = cast(extract("epoch", age), Float) / _SECONDS_PER_DAY
        max_days = float(self.recency_max_days)
        capped_age = func.least(
            func.greatest(age_days, 0.0, type_=Float), max_days, type_=Float
        )
        # Rows without any timestamp score 0.
        recency = func.coalesce(1.0 - capped_age / max_days, 0.0, type_=Float)

        ceiling = float(self.dashboard_count_ceiling)
        dashboard = (
            func.least(
                cast(func.coalesce(t.c.dashboardcard_count, 0), Float), ceiling, type_=Float
            )
            / ceiling
        )

        model = 1.0 - cast(t.c.model_rank, Float) / float(len(MODEL_RANKING))

        scores = {
            "text": text_score,
            "pinned": case((t.c.pinned.is_(True), 1.0), else_=0.0),
            "recency": recency,
            "dashboard": dashboard,
            "model": model,
            "verified": case((t.c.verified.is_(True), 1.0), else_=0.0),
        }
        return {name: scores[name] for name in SCORER_NAMES}

    def with_scores(self, ctx: SearchContext, stmt: Select) -> Select:
        """Add one <name>_score column per scorer and total_score to stmt."""
        scores = self.scorers(ctx.search_term)
        weighted = [expr * self.weight(name) for name, expr in scores.items()]
        total = functools.reduce(operator.add, weighted)
        logger.debug("Scoring with weights %s", self._weights)
        return stmt.add_columns(
            *(expr.label(score_column(name)) for name, expr in scores.items()),
            total.label("total_score"),
        )
