"""OpenTelemetry spans around engine builds, document indexing and searches.

Engines only ask the API for a tracer. Installing a tracer provider is left to
the embedding application; the command line does it through
:func:`init_tracing` when ``--telemetry`` is given.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.sdk.trace.export import SpanExporter
    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

TRACER_NAME = "vector_search"

# Set by init_tracing; engines otherwise use the global proxy tracer
_tracer_holder: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(service_name: str = "vector-search", *, exporter: SpanExporter | None = None) -> TracerProvider:
    """Install a global SDK tracer provider, optionally exporting every finished span."""

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = provider.get_tracer(TRACER_NAME)
    logger.debug("Tracing enabled for %s", service_name)
    return provider


def get_tracer() -> Tracer:
    return _tracer_holder["tracer"] or trace.get_tracer(TRACER_NAME)


@contextmanager
def create_span(name: str, attributes: dict[str, Any] | None = None) -> Generator[Span, None, None]:
    """Run the block inside a span; an escaping exception marks the span as failed."""
    with get_tracer().start_as_current_span(name, attributes=attributes) as span:
        yield span
