"""Readiness gate: no strategy runs before the index exists."""

from __future__ import annotations

from typing import TYPE_CHECKING

from omnisearch.domain.exceptions import IndexNotReadyException

if TYPE_CHECKING:
    from omnisearch.application.interfaces.services import IIndexLifecycle


class IndexReadinessGate:
    """Fails fast while the index lifecycle reports uninitialized.

    The flag is read without synchronization; a search racing a first
    initialization sees "not ready" and is expected to retry.
    """

    def __init__(self, lifecycle: IIndexLifecycle) -> None:
        self.lifecycle = lifecycle

    def is_ready(self) -> bool:
        """Return True once the index has been initialized at least once."""
        return self.lifecycle.is_initialized()

    def ensure_ready(self, search_engine: str | None = None) -> None:
        """Raise IndexNotReadyException unless the index is initialized."""
        if not self.is_ready():
            raise IndexNotReadyException(search_engine)
