"""Logging and OpenTelemetry initialization helpers."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from culturegraph.core.config import Settings, get_settings

logger = logging.getLogger(__name__)
_TRACING_INITIALIZED = False
_LOGGING_INITIALIZED = False


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Apply the configured log level once per process."""

    global _LOGGING_INITIALIZED
    if _LOGGING_INITIALIZED:
        return
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # The driver logs every routing-table refresh at INFO.
    logging.getLogger("neo4j").setLevel(logging.WARNING)
    _LOGGING_INITIALIZED = True


def setup_tracing(settings: Optional[Settings] = None) -> None:
    """Install an SDK tracer provider, exporting over OTLP when configured."""

    global _TRACING_INITIALIZED
    if _TRACING_INITIALIZED:
        return
    settings = settings or get_settings()

    resource = Resource.create(
        {
            "service.name": settings.SERVICE_NAME,
            "service.version": settings.SERVICE_VERSION,
            "environment": settings.ENVIRONMENT,
        }
    )
    provider = TracerProvider(resource=resource)
    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        headers = _parse_headers(settings.OTEL_EXPORTER_OTLP_HEADERS)
        exporter = OTLPSpanExporter(endpoint=str(settings.OTEL_EXPORTER_OTLP_ENDPOINT), headers=headers or None)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("OpenTelemetry tracing exporting to %s", settings.OTEL_EXPORTER_OTLP_ENDPOINT)
    else:
        logger.info("OpenTelemetry tracing initialized without an exporter")
    trace.set_tracer_provider(provider)
    _TRACING_INITIALIZED = True


def _parse_headers(raw_headers: Optional[str]) -> Dict[str, str]:
    if not raw_headers:
        return {}
    pairs = {}
    for item in raw_headers.split(","):
        if not item.strip():
            continue
        if "=" not in item:
            continue
        key, value = item.split("=", 1)
        pairs[key.strip()] = value.strip()
    return pairs


__all__ = ["configure_logging", "setup_tracing"]
