"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from omnisearch.infrastructure.
"""

from omnisearch.application.interfaces.repositories import ISearchRepository
from omnisearch.application.interfaces.services import (
    AmbientIdentity,
    IIndexIngestion,
    IIndexLifecycle,
    IIndexStore,
    ILegacySearchSource,
    IPermissionProvider,
    IScorerRegistry,
)

__all__ = [
    "AmbientIdentity",
    "IIndexIngestion",
    "IIndexLifecycle",
    "IIndexStore",
    "ILegacySearchSource",
    "IPermissionProvider",
    "IScorerRegistry",
    "ISearchRepository",
]
