"""
Metrics middleware for Prometheus.

Records HTTP request metrics for monitoring.
"""

import re
import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import (
    http_request_duration_seconds,
    http_requests_total,
)

# Corporation codes are caller-chosen, so they are collapsed to keep
# label cardinality bounded.
_CORPORATION_CODE = re.compile(r"^(/api/v1/corporations)/[^/]+")


def normalize_endpoint(path: str) -> str:
    """Path with variable segments replaced by placeholders."""
    return _CORPORATION_CODE.sub(r"\1/{code}", path.split("?")[0])


class MetricsMiddleware:
    """
    Middleware to record HTTP metrics for Prometheus.

    Records:
    - Request count by method, endpoint, status
    - Request duration histogram
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request and record metrics."""
        start_time = time.time()
        endpoint = normalize_endpoint(request.path)
        status_code = 500

        try:
            response = self.get_response(request)
            status_code = response.status_code
            return response
        finally:
            http_requests_total.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
            ).inc()
            http_request_duration_seconds.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(time.time() - start_time)
