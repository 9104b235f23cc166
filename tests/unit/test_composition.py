"""Tests for the composition root wiring."""

from unittest.mock import MagicMock

import pytest

from omnisearch.composition import build_scorer_registry, build_search_service
from omnisearch.core.config import DEFAULT_SEARCH_WEIGHTS, Settings
from omnisearch.domain.exceptions import UnknownScorerException


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, database_url="", **overrides)


def test_registry_uses_configured_scoring_settings() -> None:
    settings = _settings(
        search_text_language="simple",
        search_recency_max_days=30,
        search_dashboard_count_ceiling=4,
    )
    registry = build_scorer_registry(settings)
    assert registry.language == "simple"
    assert registry.recency_max_days == 30
    assert registry.dashboard_count_ceiling == 4
    assert registry.weight("text") == float(DEFAULT_SEARCH_WEIGHTS["text"])


def test_registry_rejects_missing_weight() -> None:
    weights = dict(DEFAULT_SEARCH_WEIGHTS)
    weights.pop("verified")
    with pytest.raises(UnknownScorerException):
        build_scorer_registry(_settings(search_weights=weights))


def test_search_service_is_wired_from_settings() -> None:
    settings = _settings(search_text_language="simple", search_default_limit=25)
    db = MagicMock()
    legacy = MagicMock()
    ingestion = MagicMock()
    lifecycle = MagicMock()
    ambient = MagicMock(return_value=None)

    service = build_search_service(
        db, legacy, ingestion, lifecycle=lifecycle, ambient=ambient, settings=settings
    )

    repo = service.search_repo
    assert repo.db is db
    assert repo.legacy_source is legacy
    assert repo.default_limit == 25
    assert repo.index_store.language == "simple"
    assert repo.scorers is service.registry
    assert service.lifecycle is lifecycle
    assert service.ingestion is ingestion
    assert service.ambient is ambient
    assert service.settings is settings
