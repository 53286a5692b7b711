"""
Corporation API views.

These endpoints are used by registered apps to:
- Create corporations
- Read the public corporation view
- Update a corporation, either on behalf of a linked consumer
  (Consumer-Key header) or as an administrator (by code)
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_response
from api.v1.corporations.serializers import (
    CorporationResponseSerializer,
    CreateCorporationRequestSerializer,
    UpdateCorporationRequestSerializer,
)
from core.domain.exceptions import AuthorizationError
from core.instrumentation import Status, StatusCode, get_tracer
from corporations.application.commands.create_corporation import CreateCorporationCommand
from corporations.application.commands.update_corporation import UpdateCorporationCommand
from corporations.application.handlers.create_corporation_handler import (
    CreateCorporationHandler,
)
from corporations.application.handlers.get_corporation_handler import GetCorporationHandler
from corporations.application.handlers.update_corporation_handler import (
    UpdateCorporationHandler,
)
from corporations.application.queries.get_corporation import GetCorporationQuery
from corporations.infrastructure.repositories.django_corporation_repository import (
    DjangoCorporationRepository,
)

# Initialize repositories (in production, use DI container)
_corporation_repo = DjangoCorporationRepository()

tracer = get_tracer(__name__)

ACCESS_TOKEN_PARAMETER = OpenApiParameter(
    name="X-Access-Token",
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Session token from POST /api/v1/auth",
)

CONSUMER_KEY_PARAMETER = OpenApiParameter(
    name="Consumer-Key",
    type=str,
    location=OpenApiParameter.HEADER,
    required=False,
    description="Consumer on whose behalf the app acts",
)


class CorporationCollectionView(APIView):
    """View for creating corporations and self-service updates."""

    @extend_schema(
        operation_id="create_corporation",
        summary="Create Corporation",
        description="Create a corporation with a unique code.",
        tags=["Corporations"],
        parameters=[ACCESS_TOKEN_PARAMETER],
        request=CreateCorporationRequestSerializer,
        responses={
            201: CorporationResponseSerializer,
            400: {"description": "Code unspecified"},
            409: {"description": "Code already used"},
        },
    )
    def post(self, request: Request) -> Response:
        """Create a corporation."""
        return async_to_sync(self._handle_create)(request)

    @extend_schema(
        operation_id="update_own_corporation",
        summary="Update Own Corporation",
        description=(
            "Update the corporation of the consumer named by the Consumer-Key header. "
            "Only administrators may change the banned flag."
        ),
        tags=["Corporations"],
        parameters=[ACCESS_TOKEN_PARAMETER, CONSUMER_KEY_PARAMETER],
        request=UpdateCorporationRequestSerializer,
        responses={
            200: CorporationResponseSerializer,
            403: {"description": "Field not writable by this caller"},
            404: {"description": "Client not found"},
            409: {"description": "Code already used"},
        },
    )
    def put(self, request: Request) -> Response:
        """Update the caller consumer's corporation."""
        return async_to_sync(self._handle_update)(request)

    async def _handle_create(self, request: Request) -> Response:
        """Async handler for create corporation."""
        with tracer.start_as_current_span("create_corporation") as span:
            span.set_attribute("operation", "create_corporation")

            serializer = CreateCorporationRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            handler = CreateCorporationHandler(corporation_repository=_corporation_repo)
            result = await handler.handle(CreateCorporationCommand(**serializer.validated_data))

            span.set_attribute("corporation.code", result.code)
            span.set_status(Status(StatusCode.OK))
            return Response(
                CorporationResponseSerializer(result).data, status=status.HTTP_201_CREATED
            )

    async def _handle_update(self, request: Request) -> Response:
        """Async handler for self-service update."""
        with tracer.start_as_current_span("update_own_corporation") as span:
            span.set_attribute("operation", "update_own_corporation")

            serializer = UpdateCorporationRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            consumer_key = getattr(request, "consumer_key", None)
            if consumer_key:
                span.set_attribute("client.consumer_key", consumer_key)

            handler = UpdateCorporationHandler(corporation_repository=_corporation_repo)
            result = await handler.handle(
                UpdateCorporationCommand(
                    changes=dict(serializer.validated_data),
                    consumer_key=consumer_key,
                    is_admin=bool(getattr(request, "is_admin", False)),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(CorporationResponseSerializer(result).data, status=status.HTTP_200_OK)


class CorporationDetailView(APIView):
    """View for reading a corporation and administrative updates."""

    @extend_schema(
        operation_id="get_corporation",
        summary="Get Corporation",
        description="Public corporation view with the number of active clients.",
        tags=["Corporations"],
        parameters=[ACCESS_TOKEN_PARAMETER],
        responses={
            200: CorporationResponseSerializer,
            404: {"description": "Corporation not found"},
        },
    )
    def get(self, request: Request, code: str) -> Response:
        """Get a corporation by code."""
        return async_to_sync(self._handle_get)(request, code)

    @extend_schema(
        operation_id="update_corporation",
        summary="Update Corporation (admin)",
        description="Update any corporation by code. Requires an administrative app.",
        tags=["Corporations"],
        parameters=[ACCESS_TOKEN_PARAMETER],
        request=UpdateCorporationRequestSerializer,
        responses={
            200: CorporationResponseSerializer,
            403: {"description": "Caller is not an administrator"},
            404: {"description": "Corporation not found"},
            409: {"description": "Code already used"},
        },
    )
    def put(self, request: Request, code: str) -> Response:
        """Update a corporation as an administrator."""
        return async_to_sync(self._handle_update)(request, code)

    async def _handle_get(self, _request: Request, code: str) -> Response:
        """Async handler for get corporation."""
        with tracer.start_as_current_span("get_corporation") as span:
            span.set_attribute("operation", "get_corporation")
            span.set_attribute("corporation.code", code)

            handler = GetCorporationHandler(corporation_repository=_corporation_repo)
            result = await handler.handle(GetCorporationQuery(code=code))

            span.set_status(Status(StatusCode.OK))
            return Response(CorporationResponseSerializer(result).data, status=status.HTTP_200_OK)

    async def _handle_update(self, request: Request, code: str) -> Response:
        """Async handler for administrative update."""
        with tracer.start_as_current_span("update_corporation") as span:
            span.set_attribute("operation", "update_corporation")
            span.set_attribute("corporation.code", code)

            if not getattr(request, "is_admin", False):
                span.set_status(Status(StatusCode.ERROR, "Not an administrator"))
                raise AuthorizationError()

            serializer = UpdateCorporationRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            handler = UpdateCorporationHandler(corporation_repository=_corporation_repo)
            result = await handler.handle(
                UpdateCorporationCommand(
                    changes=dict(serializer.validated_data),
                    target_code=code,
                    is_admin=True,
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(CorporationResponseSerializer(result).data, status=status.HTTP_200_OK)
