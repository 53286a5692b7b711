"""
Integration tests for client and client token API endpoints.
"""

from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.urls import reverse
from django.utils import timezone


@pytest.fixture
def client_headers(app_headers):
    """Session headers acting on behalf of consumer c1."""
    return {**app_headers, "HTTP_CONSUMER_KEY": "c1"}


@pytest.mark.django_db
@pytest.mark.integration
class TestClientAPI:
    """Tests for /api/v1/client."""

    def test_grant_demo(self, api_client, client_headers, db_corporation, db_license_keys):
        """Test a demo lasts 30 days."""
        response = api_client.post(
            reverse("client:grant-demo"), {"code": "ACME"}, format="json", **client_headers
        )

        assert response.status_code == 201
        assert response.data["is_demo"] is True
        assert response.data["remain_days"] == 30
        assert response.data["license_key"] in db_license_keys

    def test_grant_demo_without_consumer_key(
        self, api_client, app_headers, db_corporation, db_license_keys
    ):
        """Test the Consumer-Key header is required."""
        response = api_client.post(
            reverse("client:grant-demo"), {"code": "ACME"}, format="json", **app_headers
        )

        assert response.status_code == 400
        assert response.data["error"]["code"] == "CONSUMER_KEY_UNSPECIFIED"

    def test_grant_demo_exhausted(self, api_client, client_headers, db_corporation):
        """Test an empty inventory is reported."""
        response = api_client.post(
            reverse("client:grant-demo"), {"code": "ACME"}, format="json", **client_headers
        )

        assert response.status_code == 409
        assert response.data["error"]["code"] == "LICENSE_KEYS_OVER"

    def test_grant_demo_unknown_corporation(self, api_client, client_headers, db_license_keys):
        """Test an unknown code is not found."""
        response = api_client.post(
            reverse("client:grant-demo"), {"code": "NOPE"}, format="json", **client_headers
        )

        assert response.status_code == 404
        assert response.data["error"]["code"] == "CORPORATION_NOT_FOUND"

    def test_grant_demo_missing_code(self, api_client, client_headers):
        """Test the request body is validated."""
        response = api_client.post(
            reverse("client:grant-demo"), {}, format="json", **client_headers
        )

        assert response.status_code == 400
        assert response.data["error"]["code"] == "VALIDATION_ERROR"

    def test_link_unlink_relink(
        self, api_client, app_headers, db_corporation, db_license_keys
    ):
        """Test relinking a key resumes its period."""
        first = api_client.post(
            reverse("client:link-client"),
            {"code": "ACME", "license_key": "K1"},
            format="json",
            HTTP_CONSUMER_KEY="c2",
            **app_headers,
        )
        unlinked = api_client.post(
            reverse("client:unlink-client"), HTTP_CONSUMER_KEY="c2", **app_headers
        )
        second = api_client.post(
            reverse("client:link-client"),
            {"code": "ACME", "license_key": "K1"},
            format="json",
            HTTP_CONSUMER_KEY="c3",
            **app_headers,
        )

        assert first.status_code == 201
        assert first.data["remain_days"] == 365
        assert unlinked.status_code == 200
        assert unlinked.data["license_key"] == "K1"
        assert second.status_code == 201
        assert second.data["begin_date"] == first.data["begin_date"]
        assert second.data["end_date"] == first.data["end_date"]

    def test_link_already_linked(self, api_client, client_headers, db_corporation, db_license_keys):
        """Test a linked consumer cannot link again."""
        api_client.post(
            reverse("client:link-client"),
            {"code": "ACME", "license_key": "K1"},
            format="json",
            **client_headers,
        )

        response = api_client.post(
            reverse("client:link-client"),
            {"code": "ACME", "license_key": "K2"},
            format="json",
            **client_headers,
        )

        assert response.status_code == 409
        assert response.data["error"]["code"] == "CLIENT_ALREADY_LINKED"

    def test_link_used_key(self, api_client, app_headers, db_corporation, db_license_keys):
        """Test a used key is not found."""
        api_client.post(
            reverse("client:link-client"),
            {"code": "ACME", "license_key": "K1"},
            format="json",
            HTTP_CONSUMER_KEY="c1",
            **app_headers,
        )

        response = api_client.post(
            reverse("client:link-client"),
            {"code": "ACME", "license_key": "K1"},
            format="json",
            HTTP_CONSUMER_KEY="c2",
            **app_headers,
        )

        assert response.status_code == 404
        assert response.data["error"]["code"] == "LICENSE_KEY_NOT_FOUND"

    def test_unlink_unknown_client(self, api_client, client_headers):
        """Test unlinking without attachment."""
        response = api_client.post(reverse("client:unlink-client"), **client_headers)

        assert response.status_code == 404
        assert response.data["error"]["code"] == "CLIENT_NOT_FOUND"

    def test_client_status(self, api_client, client_headers, db_corporation, db_license_keys):
        """Test the status of a linked client."""
        api_client.post(
            reverse("client:grant-demo"), {"code": "ACME"}, format="json", **client_headers
        )

        response = api_client.get(reverse("client:client-status"), **client_headers)

        assert response.status_code == 200
        assert response.data["consumer_key"] == "c1"
        assert response.data["corporation"]["code"] == "ACME"
        assert response.data["is_demo"] is True
        assert response.data["remain_days"] == 29

    def test_client_status_unknown(self, api_client, client_headers):
        """Test the status of an unlinked client."""
        response = api_client.get(reverse("client:client-status"), **client_headers)

        assert response.status_code == 404
        assert response.data["error"]["code"] == "CLIENT_NOT_FOUND"


@pytest.mark.django_db
@pytest.mark.integration
class TestClientTokenAPI:
    """Tests for /api/v1/client/token and /api/v1/token/client."""

    def _issue(self, api_client, client_headers):
        api_client.post(
            reverse("client:grant-demo"), {"code": "ACME"}, format="json", **client_headers
        )
        response = api_client.post(reverse("client:issue-token"), **client_headers)
        assert response.status_code == 200
        return response.data["token"]

    def test_issue_and_validate(self, api_client, client_headers, db_corporation, db_license_keys):
        """Test a token authenticates client calls."""
        token = self._issue(api_client, client_headers)

        response = api_client.get(reverse("token:token-client"), HTTP_X_CLIENT_TOKEN=token)

        assert response.status_code == 200
        assert response.data["consumer_key"] == "c1"
        assert response.data["corporation"]["code"] == "ACME"

    def test_issue_for_unlinked_client(self, api_client, client_headers):
        """Test unlinked clients get no token."""
        response = api_client.post(reverse("client:issue-token"), **client_headers)

        assert response.status_code == 404
        assert response.data["error"]["code"] == "CLIENT_NOT_FOUND"

    def test_unknown_token(self, api_client):
        """Test an unknown token is not found."""
        response = api_client.get(reverse("token:token-client"), HTTP_X_CLIENT_TOKEN="0" * 32)

        assert response.status_code == 404
        assert response.data["error"]["code"] == "TOKEN_NOT_FOUND"

    def test_expired_token(
        self, api_client, client_headers, db_corporation, db_license_keys, corporation_repository
    ):
        """Test a token stops working at its end date."""
        token = self._issue(api_client, client_headers)
        _, attachment = async_to_sync(corporation_repository.find_active_attachment)("c1")
        now = timezone.now()
        async_to_sync(corporation_repository.set_token)(
            attachment.id, token, now - timedelta(minutes=20), now
        )

        response = api_client.get(reverse("token:token-client"), HTTP_X_CLIENT_TOKEN=token)

        assert response.status_code == 404
        assert response.data["error"]["code"] == "TOKEN_NOT_FOUND"

    def test_update_via_token(self, api_client, client_headers, db_corporation, db_license_keys):
        """Test a token holder updates its corporation."""
        token = self._issue(api_client, client_headers)

        response = api_client.put(
            reverse("token:token-client"),
            {"city": "Capital"},
            format="json",
            HTTP_X_CLIENT_TOKEN=token,
        )

        assert response.status_code == 200
        assert response.data["city"] == "Capital"
        assert response.data["active_clients"] == 1

    def test_update_via_token_cannot_ban(
        self, api_client, client_headers, db_corporation, db_license_keys
    ):
        """Test token holders cannot ban their corporation."""
        token = self._issue(api_client, client_headers)

        response = api_client.put(
            reverse("token:token-client"),
            {"banned": True},
            format="json",
            HTTP_X_CLIENT_TOKEN=token,
        )

        assert response.status_code == 403
