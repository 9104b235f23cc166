"""Shared utility helpers (datetime)."""

from omnisearch.shared.utils.datetime import ensure_utc, parse_datetime

__all__ = ["ensure_utc", "parse_datetime"]
