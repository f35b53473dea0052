from __future__ import annotations

import logging

from fastapi import FastAPI
from librarydesk.core.config import settings
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from sqlalchemy import Engine

logger = logging.getLogger(__name__)


def init_otel(app: FastAPI) -> bool:
    """Install the tracer provider and instrument the app.

    Must run before the app serves its first request. Returns False without
    touching anything when OTEL_ENABLED is off.
    """
    if not settings.otel_enabled:
        return False

    resource = Resource.create({"service.name": settings.api_name})
    provider = TracerProvider(resource=resource)

    endpoint = settings.otel_otlp_endpoint
    exporter = OTLPSpanExporter(endpoint=endpoint) if endpoint else OTLPSpanExporter()

    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)
    logger.info("OpenTelemetry tracing enabled (endpoint=%s)", endpoint)
    return True


def instrument_engine(engine: Engine) -> None:
    if settings.otel_enabled:
        SQLAlchemyInstrumentor().instrument(engine=engine)
