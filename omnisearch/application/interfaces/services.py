"""Service interfaces (ports) for search collaborators.

Protocols define contracts for the index store, legacy source, permission
provider, scorer registry, and index lifecycle (DIP). Query and predicate
types are SQLAlchemy constructs, imported for type checking only.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select

    from omnisearch.application.dtos.search import IdentityContext, SearchContext


# Ambient caller identity accessor (read-only, request-scoped).
AmbientIdentity = Callable[[], "IdentityContext | None"]


class IIndexStore(Protocol):
    """Protocol for building queries against the full-text index."""

    def search_query(
        self,
        search_term: str,
        ctx: SearchContext,
        identity: IdentityContext,
        projection: Sequence[Any] | None = None,
    ) -> Select:
        """Return a composable SELECT over matching index rows.

        projection None selects the full row; otherwise the given columns.
        """

    def search_models(self, ctx: SearchContext, identity: IdentityContext) -> frozenset[str]:
        """Return the model filter in effect for ctx (defaults applied)."""


class ILegacySearchSource(Protocol):
    """Protocol for the legacy entity-rendering query (keyed by model and id)."""

    def full_search_query(self, params: Mapping[str, Any]) -> Select:
        """Return a SELECT producing display-ready rows with model and id columns.

        The query applies its own permission filtering.
        """


class IPermissionProvider(Protocol):
    """Protocol for permission predicates over a collection id column."""

    def permitted_clause(
        self, identity: IdentityContext, column: ColumnElement[Any]
    ) -> ColumnElement[bool]:
        """Predicate true exactly for collections identity may read. Never None."""

    def personal_clause(
        self,
        ctx: SearchContext,
        identity: IdentityContext,
        column: ColumnElement[Any],
    ) -> ColumnElement[bool] | None:
        """Additional personal-collections restriction, or None for no restriction."""


class IScorerRegistry(Protocol):
    """Protocol for named scorers and their weights."""

    def names(self) -> tuple[str, ...]:
        """Scorer names in fixed registry order."""

    def weight(self, name: str) -> float:
        """Configured weight for scorer name (raises UnknownScorerException)."""

    def scorers(self, search_term: str) -> dict[str, ColumnElement[Any]]:
        """Ordered mapping name -> per-row raw score expression."""


class IIndexLifecycle(Protocol):
    """Protocol for index table lifecycle (create, stage, activate)."""

    def is_initialized(self) -> bool:
        """True once the active index has been ensured at least once."""

    async def ensure_ready(self, force_reset: bool = False) -> None:
        """Create the active index if missing (dropping it first when force_reset)."""

    async def maybe_create_pending(self) -> None:
        """Create the pending index if missing."""

    async def activate_pending(self) -> None:
        """Atomically replace the active index with the pending one."""


class IIndexIngestion(Protocol):
    """Protocol for populating the index with every searchable entity."""

    async def populate_index(self) -> None:
        """Write index rows into the active (and pending, if present) index."""
