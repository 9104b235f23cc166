"""Domain enumerations for search.

Enums represent fixed sets of domain values (e.g. retrieval strategy).
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class SearchEngine(str, Enum):
    """Retrieval strategy for one search call.

    FULLTEXT answers purely from the index; HYBRID narrows candidates with the
    index and renders them through the legacy query.
    """

    FULLTEXT = "fulltext"
    HYBRID = "hybrid"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid engine values as strings."""
        return [engine.value for engine in cls]

    @classmethod
    def resolve(
        cls, value: "SearchEngine | str | None", default: "SearchEngine | None" = None
    ) -> "SearchEngine":
        """Map a requested engine identifier to a strategy.

        Accepts enum members, plain values ('hybrid') and namespaced values
        ('search.engine/hybrid'). Absent or unrecognized values fall back to
        default (FULLTEXT when not given).

        Args:
            value: Requested engine identifier.
            default: Engine used when value is absent or unknown.

        Returns:
            The resolved SearchEngine.
        """
        fallback = default or cls.FULLTEXT
        if value is None:
            return fallback
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower().removeprefix("search.engine/")
        try:
            return cls(name)
        except ValueError:
            logger.debug(
                "Unknown search engine %r, falling back to %s", value, fallback.value
            )
            return fallback


class PersonalCollectionFilter(str, Enum):
    """Restriction on personal collections applied on top of permissions."""

    ONLY = "only"
    ONLY_MINE = "only_mine"
    EXCLUDE = "exclude"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid filter values as strings."""
        return [f.value for f in cls]
