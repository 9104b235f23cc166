"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from omnisearch.application.dtos.search import SearchContext


class ISearchRepository(Protocol):
    """Protocol for executing composed search queries against the index store.

    Every method expects a context whose identity is already resolved.
    """

    async def stream_fulltext(
        self, ctx: SearchContext
    ) -> AsyncIterator[Mapping[str, Any]]:
        """Stream permission-filtered, scored index rows (full projection)."""

    async def stream_hybrid(
        self, ctx: SearchContext
    ) -> AsyncIterator[Mapping[str, Any]]:
        """Stream legacy rows joined to index matches on (model, model_id)."""

    async def model_set(self, ctx: SearchContext) -> set[str]:
        """Return distinct models with at least one visible match (ignores ctx.models)."""
