"""Spans around verification engine calls.

Span Hierarchy:
    verification:<operation> (one per verify() run)
    └── spans created by the engine, if it is instrumented
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Span, StatusCode

logger = logging.getLogger(__name__)

TRACER_NAME = "devverify.panel"


def get_tracer() -> trace.Tracer:
    """Get the OpenTelemetry tracer for panel spans.

    Without an installed provider this is the API's no-op tracer.
    """
    return trace.get_tracer(TRACER_NAME)


@contextmanager
def verification_span(
    operation: str,
    request: Any,
    **attributes: Any,
) -> Generator[Span, None, None]:
    """Create a span for a single engine operation on a request.

    Args:
        operation: What the panel is doing (e.g., "verify", "start_sas")
        request: The verification request the operation belongs to
        **attributes: Additional span attributes

    Yields:
        The OpenTelemetry span

    Example:
        with verification_span("verify", request, initiator="watcher"):
            await verifier.verify()
    """
    tracer = get_tracer()

    phase = getattr(request, "phase", None)
    span_attributes: dict[str, Any] = {
        "verification.operation": operation,
        "verification.other_user_id": str(getattr(request, "other_user_id", "")),
        "verification.phase": getattr(phase, "name", str(phase)),
    }
    for key, value in attributes.items():
        span_attributes[f"verification.{key}"] = value

    with tracer.start_as_current_span(
        name=f"verification:{operation}",
        attributes=span_attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
            span.set_status(StatusCode.OK)
        except Exception as e:
            record_error(span, e)
            raise


def record_error(span: Span, error: Exception) -> None:
    """Record an exception on a span and mark it failed."""
    span.record_exception(error)
    span.set_status(StatusCode.ERROR, str(error))
