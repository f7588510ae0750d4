"""Telemetry and observability for devverify.

Usage:
    from devverify.telemetry import init_telemetry, verification_span

    # Initialize once at startup
    init_telemetry()

    with verification_span("verify", request) as span:
        span.set_attribute("verification.custom", "value")

Environment Variables:
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    OTEL_EXPORTER_OTLP_ENDPOINT: OTLP collector endpoint - default: http://localhost:4317
    OTEL_SERVICE_NAME: Service name for traces - default: devverify
    OTEL_TRACES_EXPORTER: Exporter type (otlp, console, none) - default: none
    OTEL_SDK_DISABLED: Disable tracing - default: false
"""

from .config import (
    ExporterType,
    TelemetryConfig,
    init_telemetry,
    is_telemetry_enabled,
    shutdown_telemetry,
)
from .spans import get_tracer, record_error, verification_span

__all__ = [
    "ExporterType",
    "TelemetryConfig",
    "init_telemetry",
    "is_telemetry_enabled",
    "shutdown_telemetry",
    "get_tracer",
    "record_error",
    "verification_span",
]
