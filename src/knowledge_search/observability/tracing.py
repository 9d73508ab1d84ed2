"""OpenTelemetry tracing helpers."""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import SpanKind, Status, StatusCode

from knowledge_search.observability.context import bind_span


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

_tracer_holder: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(
    service_name: str = "knowledge-search",
    resource_attributes: dict[str, str] | None = None,
    provider: TracerProvider | None = None,
) -> TracerProvider:
    """Initialize OpenTelemetry tracing.

    Pass ``provider`` to reuse an already configured provider (tests attach
    an in-memory exporter this way).
    """
    if provider is None:
        attributes = {"service.name": service_name}
        if resource_attributes:
            attributes.update(resource_attributes)
        provider = TracerProvider(resource=Resource.create(attributes))
        trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = provider.get_tracer(__name__)
    logger.info("Tracing initialized for service: %s", service_name)
    return provider


def get_tracer() -> Tracer:
    """Get the configured tracer."""
    if _tracer_holder["tracer"] is None:
        init_tracing()
    return _tracer_holder["tracer"]  # type: ignore[return-value]


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a traced span with context propagation."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name, kind=kind) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        bind_span(span)

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
