"""Spans for engine operations.

Every span the engine opens is named "automation.<operation>". Only
correlation keywords (trigger, workflow id, entity reference, dry-run
flag) are copied onto a span; evaluation contexts carry business data
and never leave the process through tracing.
"""

import inspect
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

SPAN_PREFIX = "automation"

# keyword -> span attribute
_CORRELATION_ATTRS = {
    "trigger": "automation.trigger",
    "workflow_id": "automation.workflow_id",
    "entity_type": "automation.entity_type",
    "entity_id": "automation.entity_id",
    "dry_run": "automation.dry_run",
}

_tracer = trace.get_tracer(SPAN_PREFIX)


def span_name(operation: str) -> str:
    """Return the engine span name for an operation."""
    return f"{SPAN_PREFIX}.{operation}"


def correlation_attributes(arguments: Mapping[str, Any]) -> dict[str, str | bool]:
    """Pick the correlation keywords out of a call's bound arguments.

    Enum members are recorded by value; None values are skipped.
    """
    attrs: dict[str, str | bool] = {}
    for key, attr in _CORRELATION_ATTRS.items():
        value = arguments.get(key)
        if value is None:
            continue
        if isinstance(value, bool):
            attrs[attr] = value
        else:
            attrs[attr] = str(getattr(value, "value", value))
    return attrs


@contextmanager
def _engine_span(name: str, attributes: Mapping[str, str | bool]) -> Iterator[trace.Span]:
    with _tracer.start_as_current_span(
        name, record_exception=False, set_status_on_exception=False
    ) as span:
        span.set_attributes(dict(attributes))
        try:
            yield span
        except Exception as e:
            span.set_attribute(f"{SPAN_PREFIX}.error_type", type(e).__name__)
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            raise


def traced(operation: str) -> Callable:
    """Run the decorated coroutine or function inside an "automation.<operation>" span.

    Correlation keywords are read from the bound call arguments, so they are
    recorded whether passed positionally or by keyword. Exceptions are recorded
    with their type name only; messages may quote context values.
    """

    def decorator(func: Callable) -> Callable:
        name = span_name(operation)
        signature = inspect.signature(func)

        def _attributes(args: tuple, kwargs: dict) -> dict[str, str | bool]:
            try:
                bound = signature.bind(*args, **kwargs)
            except TypeError:
                return {}
            return correlation_attributes(bound.arguments)

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _engine_span(name, _attributes(args, kwargs)):
                    return await func(*args, **kwargs)

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _engine_span(name, _attributes(args, kwargs)):
                return func(*args, **kwargs)

        return sync_wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Set attributes on the current span under the engine prefix."""
    span = trace.get_current_span()
    if span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(f"{SPAN_PREFIX}.{key}", value)
