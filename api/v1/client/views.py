"""
Client API views.

These endpoints are used by registered apps, on behalf of the
consumer named in the Consumer-Key header, to:
- Grant a demo entitlement
- Link and unlink a license key
- Read the client's entitlement
- Issue a short-lived client token
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_response
from api.v1.client.serializers import (
    ClientStatusResponseSerializer,
    ClientTokenResponseSerializer,
    EntitlementResponseSerializer,
    GrantDemoRequestSerializer,
    LinkClientRequestSerializer,
    UnlinkResponseSerializer,
)
from clients.application.commands.grant_demo import GrantDemoCommand
from clients.application.commands.issue_client_token import IssueClientTokenCommand
from clients.application.commands.link_client import LinkClientCommand
from clients.application.commands.unlink_client import UnlinkClientCommand
from clients.application.handlers.client_token_handlers import IssueClientTokenHandler
from clients.application.handlers.get_client_status_handler import GetClientStatusHandler
from clients.application.handlers.grant_demo_handler import GrantDemoHandler
from clients.application.handlers.link_client_handler import LinkClientHandler
from clients.application.handlers.unlink_client_handler import UnlinkClientHandler
from clients.application.queries.get_client_status import GetClientStatusQuery
from core.instrumentation import Status, StatusCode, get_tracer
from corporations.infrastructure.repositories.django_corporation_repository import (
    DjangoCorporationRepository,
)
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)

# Initialize repositories (in production, use DI container)
_corporation_repo = DjangoCorporationRepository()
_license_key_repo = DjangoLicenseKeyRepository()

tracer = get_tracer(__name__)

CLIENT_PARAMETERS = [
    OpenApiParameter(
        name="X-Access-Token",
        type=str,
        location=OpenApiParameter.HEADER,
        required=True,
        description="Session token from POST /api/v1/auth",
    ),
    OpenApiParameter(
        name="Consumer-Key",
        type=str,
        location=OpenApiParameter.HEADER,
        required=True,
        description="External client identifier",
    ),
]


def _consumer_key(request: Request, span) -> str:
    """Consumer key resolved by the auth middleware."""
    consumer_key = getattr(request, "consumer_key", None)
    if consumer_key:
        span.set_attribute("client.consumer_key", consumer_key)
    return consumer_key


class ClientStatusView(APIView):
    """View for a client's current entitlement."""

    @extend_schema(
        operation_id="get_client_status",
        summary="Get Client Status",
        description="Corporation profile and current period of the consumer's active attachment.",
        tags=["Client API"],
        parameters=CLIENT_PARAMETERS,
        responses={
            200: ClientStatusResponseSerializer,
            404: {"description": "Client not found"},
        },
    )
    def get(self, request: Request) -> Response:
        """Get client status."""
        return async_to_sync(self._handle_status)(request)

    async def _handle_status(self, request: Request) -> Response:
        """Async handler for client status."""
        with tracer.start_as_current_span("get_client_status") as span:
            span.set_attribute("operation", "get_client_status")

            handler = GetClientStatusHandler(corporation_repository=_corporation_repo)
            result = await handler.handle(
                GetClientStatusQuery(consumer_key=_consumer_key(request, span))
            )

            span.set_status(Status(StatusCode.OK))
            return Response(ClientStatusResponseSerializer(result).data, status=status.HTTP_200_OK)


class GrantDemoView(APIView):
    """View for granting demo entitlements."""

    @extend_schema(
        operation_id="grant_demo",
        summary="Grant Demo",
        description=(
            "Attach the consumer to a corporation with a 30 day demo period, "
            "taking any free license key from the inventory."
        ),
        tags=["Client API"],
        parameters=CLIENT_PARAMETERS,
        request=GrantDemoRequestSerializer,
        responses={
            201: EntitlementResponseSerializer,
            400: {"description": "Consumer key unspecified"},
            404: {"description": "Corporation not found"},
            409: {"description": "Client not suitable or license keys over"},
        },
    )
    def post(self, request: Request) -> Response:
        """Grant a demo entitlement."""
        return async_to_sync(self._handle_grant_demo)(request)

    async def _handle_grant_demo(self, request: Request) -> Response:
        """Async handler for demo grant."""
        with tracer.start_as_current_span("grant_demo") as span:
            span.set_attribute("operation", "grant_demo")

            serializer = GrantDemoRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            span.set_attribute("corporation.code", serializer.validated_data["code"])

            handler = GrantDemoHandler(
                corporation_repository=_corporation_repo,
                license_key_repository=_license_key_repo,
            )
            result = await handler.handle(
                GrantDemoCommand(
                    consumer_key=_consumer_key(request, span),
                    corporation_code=serializer.validated_data["code"],
                )
            )

            span.set_attribute("entitlement.end_date", result.end_date.isoformat())
            span.set_status(Status(StatusCode.OK))
            return Response(
                EntitlementResponseSerializer(result).data, status=status.HTTP_201_CREATED
            )


class LinkClientView(APIView):
    """View for linking a license key."""

    @extend_schema(
        operation_id="link_client",
        summary="Link Client",
        description=(
            "Attach the consumer to a corporation with a specific free license key. "
            "A key previously unlinked from the same corporation resumes its last period."
        ),
        tags=["Client API"],
        parameters=CLIENT_PARAMETERS,
        request=LinkClientRequestSerializer,
        responses={
            201: EntitlementResponseSerializer,
            400: {"description": "Consumer key unspecified"},
            404: {"description": "Corporation or license key not found"},
            409: {"description": "Client already linked"},
        },
    )
    def post(self, request: Request) -> Response:
        """Link a license key."""
        return async_to_sync(self._handle_link)(request)

    async def _handle_link(self, request: Request) -> Response:
        """Async handler for link."""
        with tracer.start_as_current_span("link_client") as span:
            span.set_attribute("operation", "link_client")

            serializer = LinkClientRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            span.set_attribute("corporation.code", serializer.validated_data["code"])

            handler = LinkClientHandler(
                corporation_repository=_corporation_repo,
                license_key_repository=_license_key_repo,
            )
            result = await handler.handle(
                LinkClientCommand(
                    consumer_key=_consumer_key(request, span),
                    corporation_code=serializer.validated_data["code"],
                    license_key=serializer.validated_data["license_key"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(
                EntitlementResponseSerializer(result).data, status=status.HTTP_201_CREATED
            )


class UnlinkClientView(APIView):
    """View for unlinking a client."""

    @extend_schema(
        operation_id="unlink_client",
        summary="Unlink Client",
        description="Disable the consumer's active attachment and free its license key.",
        tags=["Client API"],
        parameters=CLIENT_PARAMETERS,
        request=None,
        responses={
            200: UnlinkResponseSerializer,
            400: {"description": "Consumer key unspecified"},
            404: {"description": "Client not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Unlink the client."""
        return async_to_sync(self._handle_unlink)(request)

    async def _handle_unlink(self, request: Request) -> Response:
        """Async handler for unlink."""
        with tracer.start_as_current_span("unlink_client") as span:
            span.set_attribute("operation", "unlink_client")

            handler = UnlinkClientHandler(
                corporation_repository=_corporation_repo,
                license_key_repository=_license_key_repo,
            )
            result = await handler.handle(
                UnlinkClientCommand(consumer_key=_consumer_key(request, span))
            )

            span.set_status(Status(StatusCode.OK))
            return Response(UnlinkResponseSerializer(result).data, status=status.HTTP_200_OK)


class IssueClientTokenView(APIView):
    """View for issuing client tokens."""

    @extend_schema(
        operation_id="issue_client_token",
        summary="Issue Client Token",
        description=(
            "Issue a 20 minute token for an entitled client. Any previous token "
            "of the client stops working."
        ),
        tags=["Client API"],
        parameters=CLIENT_PARAMETERS,
        request=None,
        responses={
            200: ClientTokenResponseSerializer,
            404: {"description": "Client not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a client token."""
        return async_to_sync(self._handle_issue)(request)

    async def _handle_issue(self, request: Request) -> Response:
        """Async handler for token issue."""
        with tracer.start_as_current_span("issue_client_token") as span:
            span.set_attribute("operation", "issue_client_token")

            handler = IssueClientTokenHandler(corporation_repository=_corporation_repo)
            result = await handler.handle(
                IssueClientTokenCommand(consumer_key=_consumer_key(request, span))
            )

            span.set_attribute("token.expires_at", result.expires_at.isoformat())
            span.set_status(Status(StatusCode.OK))
            return Response(ClientTokenResponseSerializer(result).data, status=status.HTTP_200_OK)
