"""
App session authentication middleware.

Administrative routes require a session token obtained from
POST /api/v1/auth; client routes require a client token issued
through POST /api/v1/client/token.
"""

import logging
from typing import Optional

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.domain.exceptions import AuthenticationError
from integrations.application.services.session_token_service import SessionTokenService

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/"
AUTH_PATH = "/api/v1/auth"
CLIENT_TOKEN_PREFIX = "/api/v1/token/"


def _error(code: str, message: str, status: int) -> JsonResponse:
    """Error body in the same shape as the API exception handler."""
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)


class AppSessionAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for API authentication.

    This middleware:
    1. Leaves /api/v1/auth and non-API paths public
    2. Requires X-Client-Token on /api/v1/token/* (401 if missing)
    3. Requires a valid X-Access-Token on other /api/v1/* routes
       (403 if missing, 401 if invalid or expired)
    4. Exposes the Consumer-Key header as request.consumer_key
    """

    session_service_class = SessionTokenService

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401/403 if authentication fails, None otherwise
        """
        request.app_id = None  # type: ignore
        request.is_admin = False  # type: ignore
        request.consumer_key = request.headers.get("Consumer-Key") or None  # type: ignore
        request.client_token = None  # type: ignore

        if self._should_skip_auth(request.path):
            return None

        if request.path.startswith(CLIENT_TOKEN_PREFIX):
            return self._authenticate_client(request)

        return self._authenticate_app(request)

    def _should_skip_auth(self, path: str) -> bool:
        """
        Check if authentication should be skipped for this path.

        Args:
            path: Request path

        Returns:
            True if auth should be skipped
        """
        if not path.startswith(API_PREFIX):
            return True
        return path.rstrip("/") == AUTH_PATH

    def _authenticate_client(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Require a client token; the view validates it.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if the header is missing, None otherwise
        """
        token = request.headers.get("X-Client-Token", "").strip()
        if not token:
            return _error(
                "TOKEN_NOT_FOUND",
                "Missing client token. Provide X-Client-Token header.",
                401,
            )
        request.client_token = token  # type: ignore
        return None

    def _authenticate_app(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Authenticate an administrative request.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 403/401 if auth fails, None if successful
        """
        token = request.headers.get("X-Access-Token", "").strip()
        if not token:
            return _error(
                "FORBIDDEN",
                "Missing session. Provide X-Access-Token header.",
                403,
            )

        try:
            session = self.session_service_class().verify(token)
        except AuthenticationError as e:
            logger.warning("Rejected session token on %s", request.path)
            return _error(e.code, e.message, 401)

        request.app_id = session.app_id  # type: ignore
        request.is_admin = session.is_admin  # type: ignore
        return None
