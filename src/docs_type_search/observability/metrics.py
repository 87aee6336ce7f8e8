"""Search and indexing metrics.

Each metric is declared once and recorded twice: into a Prometheus collector
(scraped through :func:`get_metrics`) and into an OpenTelemetry instrument
created lazily on the configured meter.
"""

from __future__ import annotations

from contextlib import contextmanager
import threading
import time
from typing import TYPE_CHECKING, Any, Literal

from opentelemetry import metrics as otel_metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader
from opentelemetry.sdk.resources import Resource
from prometheus_client import Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator, Sequence


MetricKind = Literal["counter", "histogram", "gauge"]

_meter_holder: dict[str, Any] = {"meter": None, "provider": None}


def init_metrics(
    service_name: str = "docs-type-search",
    resource_attributes: dict[str, str] | None = None,
    metric_readers: list[MetricReader] | None = None,
) -> MeterProvider:
    """Install a meter provider once; later calls return the same provider."""
    provider = _meter_holder["provider"]
    if provider is not None:
        return provider

    resource = Resource.create({"service.name": service_name, **(resource_attributes or {})})
    provider = MeterProvider(resource=resource, metric_readers=metric_readers or [])
    otel_metrics.set_meter_provider(provider)
    _meter_holder.update(provider=provider, meter=otel_metrics.get_meter(__name__))
    return provider


def _meter():
    if _meter_holder["meter"] is None:
        init_metrics()
    return _meter_holder["meter"]


class _Recorder:
    """A metric narrowed to one label set."""

    def __init__(self, metric: MetricBridge, labels: dict[str, str]) -> None:
        self._metric = metric
        self._labels = labels

    def inc(self, amount: float = 1.0) -> None:
        self._metric.record(self._labels, amount)

    def observe(self, value: float) -> None:
        self._metric.record(self._labels, value)

    def set(self, value: float) -> None:
        self._metric.record(self._labels, value)


class MetricBridge:
    """One logical metric recorded into both Prometheus and OpenTelemetry.

    Gauges are exported to OpenTelemetry as up-down counters, so ``set`` is
    translated into the delta from the previous value of the same label set.
    """

    def __init__(self, kind: MetricKind, prometheus: Counter | Histogram | Gauge, name: str, description: str) -> None:
        self.kind = kind
        self.name = name
        self.description = description
        self._prometheus = prometheus
        self._instrument = None
        self._gauge_values: dict[tuple[tuple[str, str], ...], float] = {}
        self._lock = threading.Lock()

    def labels(self, **labels: str) -> _Recorder:
        return _Recorder(self, labels)

    def _instrument_for_kind(self):
        if self._instrument is None:
            meter = _meter()
            create = {
                "counter": meter.create_counter,
                "histogram": meter.create_histogram,
                "gauge": meter.create_up_down_counter,
            }[self.kind]
            self._instrument = create(self.name, description=self.description)
        return self._instrument

    def record(self, labels: dict[str, str], value: float) -> None:
        child = self._prometheus.labels(**labels) if labels else self._prometheus
        instrument = self._instrument_for_kind()
        if self.kind == "counter":
            child.inc(value)
            instrument.add(value, labels)
        elif self.kind == "histogram":
            child.observe(value)
            instrument.record(value, labels)
        else:
            child.set(value)
            key = tuple(sorted(labels.items()))
            with self._lock:
                delta = value - self._gauge_values.get(key, 0.0)
                self._gauge_values[key] = value
            if delta:
                instrument.add(delta, labels)


def _metric(
    kind: MetricKind,
    name: str,
    description: str,
    labelnames: Sequence[str] = (),
    **options: Any,
) -> MetricBridge:
    collector = {"counter": Counter, "histogram": Histogram, "gauge": Gauge}[kind]
    return MetricBridge(kind, collector(name, description, labelnames, **options), name, description)


SEARCH_LATENCY = _metric(
    "histogram",
    "type_search_latency_seconds",
    "Ranking latency in seconds",
    ["mode"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)
SEARCH_COUNT = _metric("counter", "type_search_queries_total", "Total ranked queries", ["mode", "status"])
INDEX_ENTRY_COUNT = _metric("gauge", "type_search_index_entries", "Entries in the search index")
PARSE_FALLBACKS = _metric(
    "counter",
    "type_search_parse_fallbacks_total",
    "Signatures that degraded to a raw variable",
)
MODULE_INDEX_FAILURES = _metric(
    "counter",
    "type_search_index_module_failures_total",
    "Modules skipped because their @docs list names a missing entry",
    ["package"],
)
PACKAGE_LOAD_LATENCY = _metric(
    "histogram",
    "type_search_package_load_seconds",
    "Time to extract chunks and append one package to the index",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)


@contextmanager
def track_latency(histogram: MetricBridge, **labels: str) -> Generator[None, None, None]:
    """Observe the wall time of the enclosed block, even when it raises."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    return generate_latest()
