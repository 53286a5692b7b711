"""
App authentication API view.

Registered applications exchange their id and key for a session
token sent as X-Access-Token on administrative routes.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_response
from api.v1.auth.serializers import AuthenticateAppRequestSerializer, SessionResponseSerializer
from core.instrumentation import Status, StatusCode, get_tracer
from integrations.application.commands.authenticate_app import AuthenticateAppCommand
from integrations.application.handlers.authenticate_app_handler import AuthenticateAppHandler
from integrations.infrastructure.repositories.django_registered_app_repository import (
    DjangoRegisteredAppRepository,
)

# Initialize repositories (in production, use DI container)
_app_repo = DjangoRegisteredAppRepository()

tracer = get_tracer(__name__)


class AuthenticateAppView(APIView):
    """View for exchanging app credentials for a session."""

    @extend_schema(
        operation_id="authenticate_app",
        summary="Authenticate App",
        description=(
            "Exchange a registered app id and key for a signed session token. "
            "The token is valid for 24 hours."
        ),
        tags=["Auth"],
        request=AuthenticateAppRequestSerializer,
        responses={
            200: SessionResponseSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "App not found or key mismatch"},
        },
    )
    def post(self, request: Request) -> Response:
        """Authenticate an app."""
        return async_to_sync(self._handle_authenticate)(request)

    async def _handle_authenticate(self, request: Request) -> Response:
        """Async handler for app authentication."""
        with tracer.start_as_current_span("authenticate_app") as span:
            span.set_attribute("operation", "authenticate_app")

            serializer = AuthenticateAppRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            span.set_attribute("app.id", serializer.validated_data["app_id"])

            handler = AuthenticateAppHandler(app_repository=_app_repo)
            result = await handler.handle(
                AuthenticateAppCommand(
                    app_id=serializer.validated_data["app_id"],
                    app_key=serializer.validated_data["app_key"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(SessionResponseSerializer(result).data, status=status.HTTP_200_OK)
