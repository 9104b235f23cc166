"""Domain layer: enums and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from omnisearch.domain.enums import PersonalCollectionFilter, SearchEngine
from omnisearch.domain.exceptions import (
    IndexNotReadyException,
    MalformedLegacyPayloadException,
    PermissionClauseException,
    SearchException,
    SqlNotConfiguredException,
    UnknownScorerException,
    ValidationException,
)

__all__ = [
    # Enums
    "PersonalCollectionFilter",
    "SearchEngine",
    # Exceptions
    "IndexNotReadyException",
    "MalformedLegacyPayloadException",
    "PermissionClauseException",
    "SearchException",
    "SqlNotConfiguredException",
    "UnknownScorerException",
    "ValidationException",
]
