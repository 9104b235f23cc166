"""Tests for domain exceptions (error_code, message, details)."""

from omnisearch.domain.exceptions import (
    IndexNotReadyException,
    MalformedLegacyPayloadException,
    PermissionClauseException,
    SearchException,
    SqlNotConfiguredException,
    UnknownScorerException,
    ValidationException,
)


def test_search_exception_default_error_code() -> None:
    """Base SearchException uses class name as error_code when not provided."""
    exc = SearchException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "SearchException"
    assert exc.details == {}
    assert str(exc) == "Something failed"


def test_search_exception_custom_error_code_and_details() -> None:
    """SearchException accepts custom error_code and details."""
    exc = SearchException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.error_code == "CUSTOM"
    assert exc.details == {"key": "value"}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("limit must be >= 0", field="limit")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "limit"}
    assert ValidationException("Invalid").details == {}


def test_index_not_ready_exception() -> None:
    """IndexNotReadyException names the engine that hit the gate."""
    exc = IndexNotReadyException("hybrid")
    assert exc.error_code == "INDEX_NOT_READY"
    assert exc.details == {"search_engine": "hybrid"}
    assert "init()" in exc.message
    assert IndexNotReadyException().details == {}


def test_malformed_legacy_payload_exception() -> None:
    """MalformedLegacyPayloadException carries the row identity."""
    exc = MalformedLegacyPayloadException("card", "12", "bad json")
    assert exc.error_code == "MALFORMED_LEGACY_PAYLOAD"
    assert exc.details == {"model": "card", "model_id": "12", "reason": "bad json"}
    assert "card 12" in exc.message


def test_unknown_scorer_exception() -> None:
    """UnknownScorerException names the scorer."""
    exc = UnknownScorerException("recency")
    assert exc.error_code == "UNKNOWN_SCORER"
    assert exc.details == {"scorer": "recency", "reason": "no weight configured"}


def test_permission_clause_exception() -> None:
    """PermissionClauseException keeps the offending path."""
    exc = PermissionClauseException("Malformed", path="/collection/x/")
    assert exc.error_code == "PERMISSION_CLAUSE_ERROR"
    assert exc.details == {"path": "/collection/x/"}


def test_sql_not_configured_exception() -> None:
    """SqlNotConfiguredException maps to SERVICE_UNAVAILABLE."""
    exc = SqlNotConfiguredException()
    assert exc.error_code == "SERVICE_UNAVAILABLE"
    assert isinstance(exc, SearchException)
