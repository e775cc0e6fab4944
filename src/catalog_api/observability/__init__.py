"""Observability: structured logging, tracing and request metrics."""

from catalog_api.observability.context import get_trace_context, set_trace_context, trace_context
from catalog_api.observability.logging import JsonFormatter, configure_logging
from catalog_api.observability.metrics import (
    CANDIDATES_SCANNED,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    get_metrics,
    init_metrics,
    track_latency,
)
from catalog_api.observability.tracing import (
    build_trace_resource_attributes,
    configure_trace_exporter,
    create_span,
    get_tracer,
    init_tracing,
)


__all__ = [
    "CANDIDATES_SCANNED",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "JsonFormatter",
    "build_trace_resource_attributes",
    "configure_logging",
    "configure_trace_exporter",
    "create_span",
    "get_metrics",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
