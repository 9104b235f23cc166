"""Shared utilities: request context, telemetry, and cross-cutting helpers.

Used by application and infrastructure. No business logic.
"""

from omnisearch.shared.utils import ensure_utc, parse_datetime

__all__ = [
    "ensure_utc",
    "parse_datetime",
]
