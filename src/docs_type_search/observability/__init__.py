"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from docs_type_search.observability.context import (
    get_trace_context,
    package_context,
    set_trace_context,
    trace_context,
)
from docs_type_search.observability.logging import JsonFormatter, configure_logging
from docs_type_search.observability.metrics import (
    INDEX_ENTRY_COUNT,
    MODULE_INDEX_FAILURES,
    PACKAGE_LOAD_LATENCY,
    PARSE_FALLBACKS,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    get_metrics,
    init_metrics,
    track_latency,
)
from docs_type_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "INDEX_ENTRY_COUNT",
    "MODULE_INDEX_FAILURES",
    "PACKAGE_LOAD_LATENCY",
    "PARSE_FALLBACKS",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "package_context",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
