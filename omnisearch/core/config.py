"""Search engine configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Invalid values (unknown engine, non-positive scoring
bounds, unknown malformed-payload policy) are rejected at load time.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default scorer weights, keyed by scorer name (see infrastructure.search.scoring).
DEFAULT_SEARCH_WEIGHTS: dict[str, float] = {
    "text": 5.0,
    "pinned": 0.0,
    "recency": 1.5,
    "dashboard": 0.0,
    "model": 2.0,
    "verified": 2.0,
}


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    Database settings are only required by the Postgres implementations;
    the application layer can be used without them (e.g. in unit tests).
    """

    # App
    app_name: str = "omnisearch"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Search
    search_default_engine: str = "fulltext"
    # JSON object in env, e.g. SEARCH_WEIGHTS='{"text": 5, "pinned": 0, ...}'
    search_weights: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_SEARCH_WEIGHTS)
    )
    search_text_language: str = "english"
    search_recency_max_days: int = 180
    search_dashboard_count_ceiling: int = 10
    # "fail": abort the call on an undecodable legacy_input; "skip": log and drop the row.
    search_malformed_payload_policy: str = "fail"
    search_default_limit: int | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_search(self) -> "Settings":
        """Validate search settings.

        - search_default_engine must be 'fulltext' or 'hybrid'.
        - Scoring bounds must be positive (they are divisors in SQL).
        - search_malformed_payload_policy must be 'fail' or 'skip'.
        """
        if self.search_default_engine not in ("fulltext", "hybrid"):
            raise ValueError(
                "search_default_engine must be 'fulltext' or 'hybrid', "
                f"got: {self.search_default_engine!r}"
            )
        if self.search_recency_max_days <= 0:
            raise ValueError("search_recency_max_days must be > 0")
        if self.search_dashboard_count_ceiling <= 0:
            raise ValueError("search_dashboard_count_ceiling must be > 0")
        if self.search_malformed_payload_policy not in ("fail", "skip"):
            raise ValueError(
                "search_malformed_payload_policy must be 'fail' or 'skip', "
                f"got: {self.search_malformed_payload_policy!r}"
            )
        if self.search_default_limit is not None and self.search_default_limit <= 0:
            raise ValueError("search_default_limit must be > 0 when set")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
