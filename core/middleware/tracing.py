"""
Tracing middleware for OpenTelemetry.

Adds a server span to every request. Credentials (session tokens,
client tokens, license keys) are never copied into span attributes.
"""

import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.instrumentation import Status, StatusCode, get_tracer
from core.middleware.metrics import normalize_endpoint

tracer = get_tracer(__name__)


class TracingMiddleware:
    """
    Middleware to add distributed tracing to requests.

    Creates a span for each request and stores its trace id on the
    request so error responses can echo it.
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request with tracing."""
        span_name = f"{request.method} {normalize_endpoint(request.path)}"
        with tracer.start_as_current_span(span_name) as span:
            self._set_request_attributes(span, request)

            trace_context = span.get_span_context()
            if trace_context.is_valid:
                request.trace_id = format(trace_context.trace_id, "032x")  # type: ignore

            start_time = time.time()
            try:
                response = self.get_response(request)
            except Exception as e:
                self._handle_exception(span, e, time.time() - start_time)
                raise
            self._set_response_attributes(span, request, response, time.time() - start_time)
            return response

    def _set_request_attributes(self, span, request: HttpRequest):
        """Set attributes from the request."""
        span.set_attribute("http.method", request.method)
        span.set_attribute("http.route", request.path)
        span.set_attribute("http.scheme", request.scheme)
        span.set_attribute("http.user_agent", request.META.get("HTTP_USER_AGENT", ""))
        span.set_attribute("http.remote_addr", request.META.get("REMOTE_ADDR", ""))
        span.set_attribute("http.request.has_access_token", "X-Access-Token" in request.headers)
        span.set_attribute("http.request.has_client_token", "X-Client-Token" in request.headers)
        if "Consumer-Key" in request.headers:
            span.set_attribute("client.consumer_key", request.headers["Consumer-Key"])

    def _set_response_attributes(self, span, request: HttpRequest, response, duration: float):
        """Set attributes from the response."""
        span.set_attribute("http.status_code", response.status_code)
        span.set_attribute("http.duration_ms", round(duration * 1000, 2))

        app_id = getattr(request, "app_id", None)
        if app_id:
            span.set_attribute("app.id", str(app_id))

        if response.status_code >= 400:
            span.set_status(Status(StatusCode.ERROR, f"HTTP {response.status_code}"))
        else:
            span.set_status(Status(StatusCode.OK))

    def _handle_exception(self, span, e: Exception, duration: float):
        """Record an exception on the span."""
        span.set_attribute("http.duration_ms", round(duration * 1000, 2))
        span.record_exception(e)
        span.set_status(Status(StatusCode.ERROR, f"{type(e).__name__}: {e}"))
