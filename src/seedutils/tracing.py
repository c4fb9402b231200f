"""
OpenTelemetry tracing for fixture loads.

Library code opens spans through trace_operation(); until the application
calls initialize_tracing() the global no-op provider is in place and spans
cost next to nothing.
"""

import logging
import os
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "seedloader"

_provider: TracerProvider | None = None


def initialize_tracing(
    service_name: str = "seedloader",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install an SDK tracer provider with the requested exporters.

    Args:
        service_name: Service name reported on every span
        otlp_endpoint: OTLP gRPC collector endpoint (e.g. "localhost:4317");
            falls back to the OTLP_ENDPOINT environment variable
        console_export: Also print finished spans to stdout

    Returns:
        Tracer bound to the new provider
    """
    global _provider

    if _provider is not None:
        logger.warning("Tracing already initialized, returning existing tracer")
        return get_tracer()

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    exporters = []

    otlp_endpoint = otlp_endpoint or os.getenv("OTLP_ENDPOINT")
    if otlp_endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
        exporters.append("OTLP")

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        exporters.append("Console")

    if not exporters:
        logger.warning("No trace exporters configured, spans will be dropped")

    trace.set_tracer_provider(provider)
    _provider = provider

    logger.info(f"Tracing initialized: {service_name} (exporters: {', '.join(exporters) or 'none'})")
    return get_tracer()


def get_tracer() -> trace.Tracer:
    """Return the seedloader tracer from the current global provider."""
    return trace.get_tracer(INSTRUMENTATION_NAME)


def shutdown_tracing() -> None:
    """Flush pending spans and shut the SDK provider down."""
    global _provider

    if _provider is None:
        return

    try:
        _provider.shutdown()
        logger.info("Tracing shutdown complete")
    finally:
        _provider = None


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes,
):
    """
    Run a block inside a span, recording any exception on it.

    Args:
        operation_name: Span name
        kind: Span kind
        **attributes: Span attributes; values are stringified

    Yields:
        The active span

    Example:
        >>> with trace_operation("load_fixture", dialect="postgresql") as span:
        ...     result = loader.load_rows(rows)
        ...     span.set_attribute("rows", result.rows)
    """
    with get_tracer().start_as_current_span(
        operation_name,
        kind=kind,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        for key, value in attributes.items():
            span.set_attribute(key, str(value))

        try:
            yield span
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise


def add_span_attributes(**attributes) -> None:
    """Attach attributes to the current span, if one is recording."""
    current_span = trace.get_current_span()
    if current_span.is_recording():
        for key, value in attributes.items():
            current_span.set_attribute(key, str(value))
