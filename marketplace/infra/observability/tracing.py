"""
OpenTelemetry Distributed Tracing

Spans for order creation and cascades. Without a configured provider the API
hands out no-op tracers, so instrumentation costs nothing in tests.
"""

import logging

from opentelemetry import trace
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.urllib3 import URLLib3Instrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider

logger = logging.getLogger(__name__)

_initialized = False

tracer = trace.get_tracer("marketplace")


def setup_tracing(service_name: str = "tradepost-marketplace", enable: bool = True) -> None:
    """
    Install an SDK tracer provider and auto-instrument Django and urllib3.

    Exporters are left to the deployment (OTEL_* environment variables or
    an added span processor).
    """
    global _initialized

    if _initialized:
        logger.warning("Tracing already initialized. Skipping.")
        return

    if not enable:
        logger.info("Tracing disabled via configuration")
        return

    try:
        resource = Resource(attributes={SERVICE_NAME: service_name})
        trace.set_tracer_provider(TracerProvider(resource=resource))

        # Traces all HTTP requests
        DjangoInstrumentor().instrument()
        # Traces outgoing image store calls (the cloudinary SDK talks over urllib3)
        URLLib3Instrumentor().instrument()

        _initialized = True
        logger.info(f"OpenTelemetry tracing initialized for service: {service_name}")
    except Exception as e:
        logger.error(f"Failed to initialize tracing: {e}")

