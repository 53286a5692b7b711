"""
Token-authenticated client API views.

Clients call these endpoints directly with the X-Client-Token header
to re-validate their entitlement and update their corporation profile.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_response
from api.v1.client.serializers import ClientStatusResponseSerializer
from api.v1.corporations.serializers import (
    CorporationResponseSerializer,
    UpdateCorporationRequestSerializer,
)
from clients.application.commands.update_client_via_token import UpdateClientViaTokenCommand
from clients.application.handlers.client_token_handlers import (
    UpdateClientViaTokenHandler,
    ValidateClientTokenHandler,
)
from clients.application.queries.validate_client_token import ValidateClientTokenQuery
from core.instrumentation import Status, StatusCode, get_tracer
from corporations.infrastructure.repositories.django_corporation_repository import (
    DjangoCorporationRepository,
)

# Initialize repositories (in production, use DI container)
_corporation_repo = DjangoCorporationRepository()

tracer = get_tracer(__name__)


class TokenClientView(APIView):
    """View for token holders."""

    @extend_schema(
        operation_id="validate_client_token",
        summary="Validate Client Token",
        description="Return the token holder's entitlement while the token is unexpired.",
        tags=["Token API"],
        parameters=[
            OpenApiParameter(
                name="X-Client-Token",
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
                description="Token from POST /api/v1/client/token",
            ),
        ],
        responses={
            200: ClientStatusResponseSerializer,
            401: {"description": "Missing client token"},
            404: {"description": "Token not found or expired"},
        },
    )
    def get(self, request: Request) -> Response:
        """Validate a client token."""
        return async_to_sync(self._handle_validate)(request)

    @extend_schema(
        operation_id="update_client_via_token",
        summary="Update Corporation via Token",
        description="Update the token holder's corporation profile.",
        tags=["Token API"],
        parameters=[
            OpenApiParameter(
                name="X-Client-Token",
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
                description="Token from POST /api/v1/client/token",
            ),
        ],
        request=UpdateCorporationRequestSerializer,
        responses={
            200: CorporationResponseSerializer,
            403: {"description": "Field not writable by clients"},
            404: {"description": "Token not found or expired"},
            409: {"description": "Code already used"},
        },
    )
    def put(self, request: Request) -> Response:
        """Update the token holder's corporation."""
        return async_to_sync(self._handle_update)(request)

    async def _handle_validate(self, request: Request) -> Response:
        """Async handler for token validation."""
        with tracer.start_as_current_span("validate_client_token") as span:
            span.set_attribute("operation", "validate_client_token")

            handler = ValidateClientTokenHandler(corporation_repository=_corporation_repo)
            result = await handler.handle(
                ValidateClientTokenQuery(token=getattr(request, "client_token", None))
            )

            span.set_attribute("client.consumer_key", result.consumer_key)
            span.set_status(Status(StatusCode.OK))
            return Response(ClientStatusResponseSerializer(result).data, status=status.HTTP_200_OK)

    async def _handle_update(self, request: Request) -> Response:
        """Async handler for token-authenticated update."""
        with tracer.start_as_current_span("update_client_via_token") as span:
            span.set_attribute("operation", "update_client_via_token")

            serializer = UpdateCorporationRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            handler = UpdateClientViaTokenHandler(corporation_repository=_corporation_repo)
            result = await handler.handle(
                UpdateClientViaTokenCommand(
                    token=getattr(request, "client_token", None),
                    changes=dict(serializer.validated_data),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(CorporationResponseSerializer(result).data, status=status.HTTP_200_OK)
