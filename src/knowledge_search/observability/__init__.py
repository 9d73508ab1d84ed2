"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from knowledge_search.observability.context import get_trace_context, set_trace_context, trace_context
from knowledge_search.observability.logging import JsonFormatter, configure_logging, configure_logging_from_settings
from knowledge_search.observability.metrics import (
    INDEX_DOC_COUNT,
    OPERATION_LATENCY,
    REQUEST_COUNT,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from knowledge_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "INDEX_DOC_COUNT",
    "OPERATION_LATENCY",
    "REQUEST_COUNT",
    "JsonFormatter",
    "configure_logging",
    "configure_logging_from_settings",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
