"""Tracing helpers: span decorator and current-span attributes.

Uses the OpenTelemetry API only. Without an SDK and exporter configured
by the host application, spans are non-recording and cost almost nothing.
"""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Only these kwarg names are copied onto spans; payloads never are.
_SAFE_SPAN_ATTR_KEYS = frozenset({"key", "asset_type", "max_age_ms", "source_url"})


def _set_safe_span_attrs(span: trace.Span, kwargs: dict[str, Any]) -> None:
    """Set span attributes from kwargs; only allowlisted keys are recorded."""
    for key, value in kwargs.items():
        if key in _SAFE_SPAN_ATTR_KEYS:
            span.set_attribute(f"arg.{key}", str(value))


def _bind_kwargs(func: Callable, args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
    """Map positional args onto parameter names so allowlisted values are traced either way."""
    names = func.__code__.co_varnames[: func.__code__.co_argcount]
    bound = dict(zip(names, args))
    bound.update(kwargs)
    return bound


def traced(operation_name: str | None = None) -> Callable:
    """Decorator to run an async function inside a span.

    The span status is ERROR when the function raises (the exception is
    recorded and re-raised), OK otherwise.

    Args:
        operation_name: Span name (defaults to module.funcname).

    Returns:
        Decorated coroutine function.
    """

    def decorator(func: Callable) -> Callable:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() requires a coroutine function, got {func!r}")
        tracer = trace.get_tracer(__name__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                if span.is_recording():
                    _set_safe_span_attrs(span, _bind_kwargs(func, args, kwargs))
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)
