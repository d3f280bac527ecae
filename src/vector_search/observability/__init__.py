"""Tracing, metrics and structured logging for vector search engines."""

from vector_search.observability.context import engine_scope, log_context
from vector_search.observability.logging import JsonFormatter, configure_logging
from vector_search.observability.metrics import (
    INDEX_DOC_COUNT,
    REGISTRY,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    UNREPRESENTABLE_VALUES,
    init_metrics,
    track_latency,
    write_metrics,
)
from vector_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "INDEX_DOC_COUNT",
    "REGISTRY",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "UNREPRESENTABLE_VALUES",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "engine_scope",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "log_context",
    "track_latency",
    "write_metrics",
]
