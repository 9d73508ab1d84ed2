"""Prometheus metrics for search operations."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


REQUEST_COUNT = Counter(
    "knowledge_search_requests_total",
    "Total search engine operations",
    ["operation", "status"],
)

OPERATION_LATENCY = Histogram(
    "knowledge_search_latency_seconds",
    "Search engine operation latency",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

INDEX_DOC_COUNT = Gauge(
    "knowledge_search_index_documents",
    "Documents in the search index",
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for metrics endpoint."""
    return CONTENT_TYPE_LATEST
