"""Trace context shared between OpenTelemetry spans and log records."""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from opentelemetry.trace import Span

trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def get_trace_context() -> dict:
    """Return the active context; empty outside any span."""
    return dict(trace_context.get() or {})


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def bind_span(span: Span) -> None:
    """Point the log context at ``span``, keeping any extra keys already set."""
    span_context = span.get_span_context()
    trace_context.set(
        {
            **(trace_context.get() or {}),
            "trace_id": format(span_context.trace_id, "032x"),
            "span_id": format(span_context.span_id, "016x"),
        }
    )
