"""OpenTelemetry tracer provider and propagation setup."""

import logging

from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.propagate import set_global_textmap
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from initload.config import Settings
from initload.errors.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

EXPORTERS = ("otlp", "console", "none")


def configure_propagation() -> None:
    """Install the W3C Trace Context propagator used to read ``traceparent``."""
    set_global_textmap(
        CompositePropagator(
            [
                TraceContextTextMapPropagator(),
                W3CBaggagePropagator(),
            ]
        )
    )


def _build_exporter(settings: Settings) -> SpanExporter | None:
    if settings.exporter == "otlp":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        return OTLPSpanExporter(endpoint=f"{settings.otlp_endpoint.rstrip('/')}/v1/traces")
    if settings.exporter == "console":
        return ConsoleSpanExporter(service_name=settings.service_name)
    if settings.exporter == "none":
        return None
    raise ConfigurationError(
        f"Unknown span exporter '{settings.exporter}'",
        details={"exporter": settings.exporter, "supported": list(EXPORTERS)},
    )


def create_tracer_provider(settings: Settings) -> TracerProvider:
    """Create a tracer provider exporting every span.

    Always sample in this demo. A production service would configure a
    parent-based ratio sampler instead.
    """
    provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: settings.service_name}),
        sampler=ALWAYS_ON,
    )
    exporter = _build_exporter(settings)
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    logger.info("Tracing configured: service_name=%s exporter=%s", settings.service_name, settings.exporter)
    return provider


def shutdown(provider: TracerProvider) -> None:
    """Flush pending spans and release exporter resources."""
    provider.shutdown()
    logger.info("Tracing shutdown complete")
