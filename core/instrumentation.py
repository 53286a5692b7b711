"""
OpenTelemetry instrumentation setup.

This module configures OpenTelemetry for distributed tracing and
exposes the tracer used by the API views. Without setup_opentelemetry()
the API's default no-op provider is used, so spans cost nothing in tests.
"""

import logging
import os
import socket

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

logger = logging.getLogger(__name__)

__all__ = ["get_tracer", "setup_opentelemetry", "Status", "StatusCode"]


def setup_opentelemetry():
    """
    Configure OpenTelemetry instrumentation.

    Sets up:
    - Distributed tracing (exported via OTLP)
    - Auto-instrumentation for Django, PostgreSQL, Redis
    - The Prometheus metrics HTTP server
    """
    # Exporters and instrumentors are only needed when tracing is enabled.
    # pylint: disable=import-outside-toplevel
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    from opentelemetry.instrumentation.django import DjangoInstrumentor
    from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor
    from opentelemetry.instrumentation.redis import RedisInstrumentor
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from prometheus_client import start_http_server

    resource = Resource.create(
        {
            "service.name": os.environ.get("OTEL_SERVICE_NAME", "corporate-license-service"),
            "service.version": os.environ.get("OTEL_SERVICE_VERSION", "1.0.0"),
            "deployment.environment": os.environ.get("ENVIRONMENT", "development"),
        }
    )

    trace_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(trace_provider)

    otlp_endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT", "http://tempo:4317")
    otlp_exporter = OTLPSpanExporter(
        endpoint=otlp_endpoint,
        insecure=os.environ.get("OTEL_EXPORTER_OTLP_INSECURE", "True") == "True",
    )
    trace_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    DjangoInstrumentor().instrument()
    Psycopg2Instrumentor().instrument()
    RedisInstrumentor().instrument()

    prometheus_port = int(os.environ.get("PROMETHEUS_PORT", "9090"))
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        port_in_use = sock.connect_ex(("127.0.0.1", prometheus_port)) == 0

    if port_in_use:
        logger.info("Prometheus metrics server already running on port %s", prometheus_port)
    else:
        try:
            start_http_server(prometheus_port, addr="0.0.0.0")
            logger.info("Prometheus metrics server started on 0.0.0.0:%s", prometheus_port)
        except OSError as e:
            logger.warning("Could not start Prometheus metrics server: %s", e)

    logger.info("OpenTelemetry instrumentation configured (endpoint %s)", otlp_endpoint)


def get_tracer(name: str):
    """
    Get a tracer instance for manual instrumentation.

    Args:
        name: Tracer name (usually module name)

    Returns:
        Tracer instance
    """
    return trace.get_tracer(name)
