"""Search and indexing metrics.

Every measurement is recorded twice: into Prometheus collectors held in the
package's own :data:`REGISTRY`, and into OpenTelemetry instruments created on
the API proxy meter. The proxy binds to whatever meter provider the embedding
application installs, before or after the first search; until then the OTel
side is a no-op. :func:`init_metrics` is the explicit opt-in used by the
command line.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import contextmanager
from pathlib import Path
import time
from typing import TYPE_CHECKING, Any

from opentelemetry import metrics as otel_metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, write_to_textfile


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.sdk.metrics.export import MetricReader


METER_NAME = "vector_search"

REGISTRY = CollectorRegistry(auto_describe=True)

_PROMETHEUS_TYPES = {"counter": Counter, "histogram": Histogram, "gauge": Gauge}


def init_metrics(service_name: str = "vector-search", *, readers: Sequence[MetricReader] = ()) -> MeterProvider:
    """Install a global SDK meter provider feeding ``readers``."""

    provider = MeterProvider(metric_readers=list(readers), resource=Resource.create({"service.name": service_name}))
    otel_metrics.set_meter_provider(provider)
    return provider


def write_metrics(path: Path) -> None:
    """Write the Prometheus exposition of :data:`REGISTRY` to ``path`` (textfile collector format)."""
    write_to_textfile(str(path), REGISTRY)


class _BoundMetric:
    def __init__(self, bridge: MetricBridge, labels: dict[str, str]) -> None:
        self._bridge = bridge
        self._labels = labels

    def inc(self, amount: float = 1.0) -> None:
        self._bridge.inc(self._labels, amount)

    def observe(self, value: float) -> None:
        self._bridge.observe(self._labels, value)

    def set(self, value: float) -> None:
        self._bridge.set(self._labels, value)


class MetricBridge:
    """One metric, recorded into a Prometheus collector and an OTel instrument."""

    def __init__(
        self,
        kind: str,
        name: str,
        description: str,
        labelnames: Sequence[str],
        **prometheus_options: Any,
    ) -> None:
        if kind not in _PROMETHEUS_TYPES:
            raise ValueError(f"Unknown metric kind: {kind}")
        self.kind = kind
        self.name = name
        self.description = description
        self.prometheus = _PROMETHEUS_TYPES[kind](
            name, description, list(labelnames), registry=REGISTRY, **prometheus_options
        )
        self._instrument = None
        # Gauges map onto an up-down counter, which only takes deltas
        self._gauge_values: dict[tuple[tuple[str, str], ...], float] = {}

    def labels(self, **labels: str) -> _BoundMetric:
        return _BoundMetric(self, labels)

    def _otel(self):
        if self._instrument is None:
            meter = otel_metrics.get_meter(METER_NAME)
            if self.kind == "counter":
                self._instrument = meter.create_counter(self.name, description=self.description)
            elif self.kind == "histogram":
                self._instrument = meter.create_histogram(self.name, unit="s", description=self.description)
            else:
                self._instrument = meter.create_up_down_counter(self.name, description=self.description)
        return self._instrument

    def inc(self, labels: dict[str, str], amount: float) -> None:
        self.prometheus.labels(**labels).inc(amount)
        self._otel().add(amount, labels)

    def observe(self, labels: dict[str, str], value: float) -> None:
        self.prometheus.labels(**labels).observe(value)
        self._otel().record(value, labels)

    def set(self, labels: dict[str, str], value: float) -> None:
        self.prometheus.labels(**labels).set(value)
        key = tuple(sorted(labels.items()))
        delta = value - self._gauge_values.get(key, 0.0)
        if delta:
            self._otel().add(delta, labels)
        self._gauge_values[key] = value


SEARCH_LATENCY = MetricBridge(
    "histogram",
    "vector_search_latency_seconds",
    "Time spent ranking one query",
    ["engine", "mode"],
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
)
SEARCH_COUNT = MetricBridge("counter", "vector_search_queries", "Queries ranked", ["engine", "mode"])
INDEX_DOC_COUNT = MetricBridge("gauge", "vector_search_index_document_count", "Documents held by an engine", ["engine"])
UNREPRESENTABLE_VALUES = MetricBridge(
    "counter", "vector_search_unrepresentable_values", "Record field values indexed as empty text", ["engine"]
)


@contextmanager
def track_latency(histogram: MetricBridge, **labels: str) -> Generator[None, None, None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)
