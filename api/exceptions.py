"""
API exception handlers.

This module maps domain exceptions to HTTP responses. Every error
body has the shape {"error": {"code": ..., "message": ...}}.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainException,
    DomainValidationError,
    ExhaustedError,
    NotFoundError,
    StorageError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

# Ordered: the first matching kind wins.
DOMAIN_STATUS_CODES = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ExhaustedError, status.HTTP_409_CONFLICT),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (DomainValidationError, status.HTTP_400_BAD_REQUEST),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: DomainException) -> int:
    """HTTP status for a domain exception kind."""
    for kind, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, kind):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def validation_error_response(errors: Dict[str, Any]) -> Response:
    """Response for serializer validation failures."""
    return Response(
        {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data.",
                "fields": errors,
            }
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, ValidationError):
        response = validation_error_response(exc.detail)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        detail = response.data.get("detail", exc.default_detail)
        response.data = {"error": {"code": code, "message": str(detail)}}
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for(exc)
    errors_total.labels(error_code=exc.code).inc()

    if status_code >= 500:
        logger.error(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    return Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)


def _handle_unexpected_exception(exc: Exception, trace_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
