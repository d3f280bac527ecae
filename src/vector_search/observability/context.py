"""Per-task correlation fields attached to log lines.

The engine name is carried in a context variable for the duration of a build,
an append or a search. Trace and span ids are read from the active
OpenTelemetry span, so they only appear once an application has installed a
tracer provider.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from opentelemetry import trace


current_engine: ContextVar[str | None] = ContextVar("current_engine", default=None)


@contextmanager
def engine_scope(name: str) -> Iterator[None]:
    """Attribute everything logged inside the block to engine ``name``."""
    token = current_engine.set(name)
    try:
        yield
    finally:
        current_engine.reset(token)


def log_context() -> dict[str, str]:
    fields: dict[str, str] = {}
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        fields["trace_id"] = format(span_context.trace_id, "032x")
        fields["span_id"] = format(span_context.span_id, "016x")
    engine = current_engine.get()
    if engine:
        fields["engine"] = engine
    return fields
