"""Utility functions and decorators for distributed tracing of search calls.

Span attributes are set explicitly by the traced code; arguments are never
recorded automatically, so search terms and identities stay out of traces.
"""

import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import context as otel_context
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")


def _record_error(span: trace.Span, error: Exception) -> None:
    span.set_status(Status(StatusCode.ERROR, str(error)))
    span.record_exception(error)


def _run_in_span_sync(span: trace.Span, run: Callable[[], T]) -> T:
    """Run a sync callable, set span status, and record exceptions."""
    try:
        result = run()
    except Exception as e:
        _record_error(span, e)
        raise
    else:
        span.set_status(Status(StatusCode.OK))
        return result


async def _run_in_span_async(span: trace.Span, run: Callable[[], Any]) -> Any:
    """Run an async callable, set span status, and record exceptions."""
    try:
        result = await run()
    except Exception as e:
        _record_error(span, e)
        raise
    else:
        span.set_status(Status(StatusCode.OK))
        return result


def traced(
    operation_name: str | None = None,
    attributes: dict | None = None,
) -> Callable:
    """Decorator to create a span for a function (sync or async).

    Args:
        operation_name: Span name (defaults to module.funcname).
        attributes: Optional dict of static attributes to set on the span.

    Returns:
        Decorated function.
    """

    def decorator(func: Callable) -> Callable:
        tracer = trace.get_tracer(__name__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name, attributes=attributes) as span:
                return await _run_in_span_async(span, lambda: func(*args, **kwargs))

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name, attributes=attributes) as span:
                return _run_in_span_sync(span, lambda: func(*args, **kwargs))

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def current_trace_context() -> otel_context.Context:
    """Capture the active trace context (to parent spans started later)."""
    return otel_context.get_current()


@contextmanager
def detached_span(
    name: str,
    parent: otel_context.Context | None = None,
    attributes: dict | None = None,
) -> Iterator[trace.Span]:
    """Span that is not made current, for work resumed across awaits/yields.

    Used around lazily consumed iterators: the span is parented on the
    captured context and ended when the block exits (including aclose()).
    """
    span = trace.get_tracer(__name__).start_span(
        name, context=parent, attributes=attributes
    )
    try:
        yield span
    except Exception as e:
        _record_error(span, e)
        raise
    finally:
        span.end()


def add_span_attributes(**attributes: str | int | float | bool | None) -> None:
    """Add attributes to the current span; None values are skipped."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(key, value)


def add_span_event(
    name: str,
    attributes: dict | None = None,
    span: trace.Span | None = None,
) -> None:
    """Add an event to span (default: the current span)."""
    span = span or trace.get_current_span()
    if span and span.is_recording():
        span.add_event(name, attributes=attributes or {})
