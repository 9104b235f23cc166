"""Shared telemetry: logging setup and tracing helpers."""

from omnisearch.shared.telemetry.logging import get_logger, setup_logging
from omnisearch.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    current_trace_context,
    detached_span,
    traced,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "traced",
    "add_span_attributes",
    "add_span_event",
    "current_trace_context",
    "detached_span",
]
