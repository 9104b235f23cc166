"""DTOs for search requests and results (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any

from omnisearch.core.constants import ROOT_PERMISSION_PATH
from omnisearch.domain.enums import PersonalCollectionFilter, SearchEngine


@dataclass(frozen=True)
class IdentityContext:
    """Effective caller identity for one search call."""

    is_superuser: bool
    current_user_id: int | None
    current_user_perms: frozenset[str] = frozenset()

    @classmethod
    def unrestricted(cls) -> IdentityContext:
        """Identity for internal callers with no request user (sees everything)."""
        return cls(
            is_superuser=True,
            current_user_id=None,
            current_user_perms=frozenset({ROOT_PERMISSION_PATH}),
        )

    @property
    def is_unrestricted(self) -> bool:
        """True when no collection is excluded on permission grounds."""
        return (
            self.is_superuser
            or self.current_user_id is None
            or ROOT_PERMISSION_PATH in self.current_user_perms
        )


@dataclass(frozen=True)
class DateRange:
    """Half-open timestamp range [start, end); either side may be open."""

    start: datetime | None = None
    end: datetime | None = None


@dataclass(frozen=True)
class SearchFilters:
    """Pass-through filters applied after permissions (all optional)."""

    created_by: frozenset[int] | None = None
    last_edited_by: frozenset[int] | None = None
    created_at: DateRange | None = None
    last_edited_at: DateRange | None = None
    verified: bool | None = None
    table_db_id: int | None = None
    ids: frozenset[int] | None = None
    personal_collections: PersonalCollectionFilter | None = None


@dataclass(frozen=True)
class SearchContext:
    """One search request. Constructed once per call and never mutated."""

    search_term: str
    models: frozenset[str] | None = None
    archived: bool | None = None
    search_engine: SearchEngine | str | None = None
    identity: IdentityContext | None = None
    filters: SearchFilters = field(default_factory=SearchFilters)
    limit: int | None = None
    offset: int | None = None

    def with_identity(self, identity: IdentityContext) -> SearchContext:
        """Return a copy bound to the resolved identity."""
        return replace(self, identity=identity)

    def with_models(self, models: frozenset[str] | None) -> SearchContext:
        """Return a copy with a different model filter."""
        return replace(self, models=models)


@dataclass(frozen=True)
class ScoreEntry:
    """One scorer's share of a result's total score."""

    name: str
    score: float
    weight: float
    contribution: float


@dataclass(frozen=True)
class ScoredResult:
    """Final search record: decoded payload plus index metadata and scores."""

    payload: dict[str, Any]
    model: str
    model_id: Any
    total_score: float | None
    pinned: bool
    scores: tuple[ScoreEntry, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_edited_at: datetime | None = None
    all_scores: tuple[ScoreEntry, ...] | None = None

    @property
    def key(self) -> tuple[str, Any]:
        """Composite identity (model, model_id), unique within one result set."""
        return (self.model, self.model_id)

    def as_dict(self) -> dict[str, Any]:
        """Flatten into one mapping (payload fields overlaid by index metadata)."""
        data = dict(self.payload)
        data.update(
            {
                "model": self.model,
                "total_score": self.total_score,
                "pinned": self.pinned,
                "scores": [asdict(entry) for entry in self.scores],
                "created_at": self.created_at,
                "updated_at": self.updated_at,
                "last_edited_at": self.last_edited_at,
            }
        )
        if self.all_scores is not None:
            data["all_scores"] = [asdict(entry) for entry in self.all_scores]
        return data


@dataclass(frozen=True)
class ScoringOutcome:
    """Score assigned by a scoring policy, with the (possibly annotated) result."""

    score: float
    result: ScoredResult
