"""Domain exceptions for the search engine.

Defines the error taxonomy raised by search composition. Callers map
them to their own responses (e.g. HTTP) using message, error_code, and
details. Underlying store errors (sqlalchemy.exc.*) are not wrapped.
"""

from typing import Any


class SearchException(Exception):
    """Base exception for all search errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. model, model_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(SearchException):
    """Raised when search input validation fails (e.g. negative limit)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class IndexNotReadyException(SearchException):
    """Raised when a search runs before the index was initialized at least once.

    Fatal to the current call. Callers run init() (or wait for an in-flight
    one) and retry.
    """

    def __init__(self, search_engine: str | None = None) -> None:
        """Initialize with the engine that was asked to run.

        Args:
            search_engine: Strategy that hit the closed gate (e.g. 'fulltext').
        """
        details = {"search_engine": search_engine} if search_engine else {}
        super().__init__(
            "Search index is not initialized. Use init() to ensure it exists.",
            "INDEX_NOT_READY",
            details,
        )


class MalformedLegacyPayloadException(SearchException):
    """Raised when an index row's legacy_input cannot be decoded into a record."""

    def __init__(self, model: Any, model_id: Any, reason: str) -> None:
        """Initialize with the row identity and decode failure.

        Args:
            model: Model of the offending row.
            model_id: Entity id of the offending row.
            reason: Human-readable decode failure.
        """
        super().__init__(
            f"Malformed legacy_input for {model} {model_id}",
            "MALFORMED_LEGACY_PAYLOAD",
            {"model": model, "model_id": model_id, "reason": reason},
        )


class UnknownScorerException(SearchException):
    """Raised when scorer registry and weights (or index rows) disagree.

    A configuration error, not a per-request condition.
    """

    def __init__(self, scorer: str, reason: str = "no weight configured") -> None:
        """Initialize with scorer name and reason.

        Args:
            scorer: The scorer name that could not be resolved.
            reason: What is inconsistent (missing weight, missing column, ...).
        """
        super().__init__(
            f"Unknown scorer {scorer!r}: {reason}",
            "UNKNOWN_SCORER",
            {"scorer": scorer, "reason": reason},
        )


class PermissionClauseException(SearchException):
    """Raised when a permission predicate cannot be built.

    Permission predicates fail closed: the query is never executed.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        """Initialize with message and optional offending permission path.

        Args:
            message: Human-readable description.
            path: Permission path that could not be interpreted.
        """
        details = {"path": path} if path else {}
        super().__init__(message, "PERMISSION_CLAUSE_ERROR", details)


class SqlNotConfiguredException(SearchException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
