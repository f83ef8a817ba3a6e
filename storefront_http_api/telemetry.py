# storefront_http_api/telemetry.py

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import Settings
from .logging import get_logger

logger = get_logger(__name__)


def setup_telemetry(settings: Settings) -> bool:
    """
    Initialize the OpenTelemetry SDK with OTLP export.

    Returns False (and leaves the no-op tracer in place) when no
    OTEL_EXPORTER_OTLP_ENDPOINT is configured.
    """
    if not settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        logger.info("telemetry_disabled", reason="no_otlp_endpoint")
        return False

    logger.info("telemetry_enabled", service=settings.OTEL_SERVICE_NAME)

    resource = Resource.create(attributes={
        "service.name": settings.OTEL_SERVICE_NAME,
        "deployment.environment": settings.APP_ENV.value,
    })
    provider = TracerProvider(resource=resource)

    exporter = OTLPSpanExporter(endpoint=f"{settings.OTEL_EXPORTER_OTLP_ENDPOINT}/v1/traces")
    provider.add_span_processor(BatchSpanProcessor(exporter))

    if settings.DEBUG:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    return True


def instrument_fastapi(app, settings: Settings) -> None:
    """Trace incoming HTTP requests when telemetry is enabled."""
    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        FastAPIInstrumentor.instrument_app(app)


def get_tracer(name: str):
    return trace.get_tracer(name)
