"""
Integration tests for the client lifecycle across handlers and storage.
"""

from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.utils import timezone

from clients.application.commands.grant_demo import GrantDemoCommand
from clients.application.commands.issue_client_token import IssueClientTokenCommand
from clients.application.commands.link_client import LinkClientCommand
from clients.application.commands.unlink_client import UnlinkClientCommand
from clients.application.commands.update_client_via_token import UpdateClientViaTokenCommand
from clients.application.handlers.client_token_handlers import (
    IssueClientTokenHandler,
    UpdateClientViaTokenHandler,
    ValidateClientTokenHandler,
)
from clients.application.handlers.get_client_status_handler import GetClientStatusHandler
from clients.application.handlers.grant_demo_handler import GrantDemoHandler
from clients.application.handlers.link_client_handler import LinkClientHandler
from clients.application.handlers.unlink_client_handler import UnlinkClientHandler
from clients.application.queries.get_client_status import GetClientStatusQuery
from clients.application.queries.validate_client_token import ValidateClientTokenQuery
from core.domain.exceptions import (
    AuthorizationError,
    ClientAlreadyLinkedError,
    ClientNotFoundError,
    ClientNotSuitableError,
    CodeAlreadyUsedError,
    CodeUnspecifiedError,
    CorporationNotFoundError,
    LicenseKeyNotFoundError,
    LicenseKeysOverError,
    TokenNotFoundError,
)
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
from corporations.infrastructure.models import ClientAttachment as ClientAttachmentModel
from corporations.infrastructure.models import EntitlementPeriod as EntitlementPeriodModel
from corporations.infrastructure.repositories.django_corporation_repository import (
    DjangoCorporationRepository,
)
from licenses.domain.license_key import LicenseKey


class StaleReadCorporationRepository(DjangoCorporationRepository):
    """Repository whose pre-checks miss an attachment written by a concurrent request."""

    async def find_active_attachment(self, consumer_key):
        return None

    async def has_any_attachment(self, consumer_key):
        return False


@pytest.fixture
def grant_demo(corporation_repository, license_key_repository):
    handler = GrantDemoHandler(corporation_repository, license_key_repository)
    return lambda consumer_key, code="ACME": async_to_sync(handler.handle)(
        GrantDemoCommand(consumer_key=consumer_key, corporation_code=code)
    )


@pytest.fixture
def link(corporation_repository, license_key_repository):
    handler = LinkClientHandler(corporation_repository, license_key_repository)
    return lambda consumer_key, license_key, code="ACME": async_to_sync(handler.handle)(
        LinkClientCommand(
            consumer_key=consumer_key, corporation_code=code, license_key=license_key
        )
    )


@pytest.fixture
def unlink(corporation_repository, license_key_repository):
    handler = UnlinkClientHandler(corporation_repository, license_key_repository)
    return lambda consumer_key: async_to_sync(handler.handle)(
        UnlinkClientCommand(consumer_key=consumer_key)
    )


@pytest.fixture
def issue_token(corporation_repository):
    handler = IssueClientTokenHandler(corporation_repository)
    return lambda consumer_key: async_to_sync(handler.handle)(
        IssueClientTokenCommand(consumer_key=consumer_key)
    )


@pytest.fixture
def validate_token(corporation_repository):
    handler = ValidateClientTokenHandler(corporation_repository)
    return lambda token: async_to_sync(handler.handle)(ValidateClientTokenQuery(token=token))


@pytest.mark.django_db
@pytest.mark.integration
class TestDemoGrants:
    """Demo grants against the inventory."""

    def test_demo_unlink_and_reuse_key(
        self, db_corporation, license_key_repository, grant_demo, unlink
    ):
        """Test an unlinked demo key goes back to the inventory."""
        async_to_sync(license_key_repository.save_many)(
            [LicenseKey.create(key="K1")]
        )

        demo = grant_demo("c1")
        assert demo.license_key == "K1"
        assert demo.is_demo is True
        assert demo.end_date - demo.begin_date == timedelta(days=30)
        assert async_to_sync(license_key_repository.count_free)() == 0

        unlinked = unlink("c1")
        assert unlinked.license_key == "K1"
        assert async_to_sync(license_key_repository.count_free)() == 1

        second = grant_demo("c2")
        assert second.license_key == "K1"

    def test_inventory_exhausted(self, db_corporation, grant_demo):
        """Test a demo fails when no key is free."""
        with pytest.raises(LicenseKeysOverError):
            grant_demo("c1")

    def test_linked_consumer_not_suitable(self, db_corporation, db_license_keys, grant_demo):
        """Test a consumer with an active attachment gets no second demo."""
        grant_demo("c1")

        with pytest.raises(ClientNotSuitableError):
            grant_demo("c1")

    def test_unlinked_consumer_gets_no_second_demo(
        self, db_corporation, db_license_keys, grant_demo, unlink, license_key_repository
    ):
        """Test unlinking does not earn the consumer a fresh demo."""
        grant_demo("c1")
        unlink("c1")

        with pytest.raises(ClientNotSuitableError):
            grant_demo("c1")
        assert async_to_sync(license_key_repository.count_free)() == 3

    def test_unknown_corporation(self, db_license_keys, grant_demo, license_key_repository):
        """Test an unknown code leaves the inventory untouched."""
        with pytest.raises(CorporationNotFoundError):
            grant_demo("c1", code="NOPE")
        assert async_to_sync(license_key_repository.count_free)() == 3

    def test_banned_corporation(
        self, db_corporation, db_license_keys, corporation_repository, grant_demo
    ):
        """Test a banned corporation accepts no demo."""
        async_to_sync(corporation_repository.save)(db_corporation.update_profile(banned=True))

        with pytest.raises(CorporationNotFoundError):
            grant_demo("c1")


@pytest.mark.django_db
@pytest.mark.integration
class TestConcurrentAttachments:
    """The active-consumer unique index decides requests that pass the pre-checks together."""

    def test_racing_demo_is_rejected_and_key_released(
        self, db_corporation, db_license_keys, grant_demo, license_key_repository
    ):
        """Test the losing demo grant frees the key it acquired."""
        grant_demo("c1")
        racing = GrantDemoHandler(StaleReadCorporationRepository(), license_key_repository)

        with pytest.raises(ClientNotSuitableError):
            async_to_sync(racing.handle)(
                GrantDemoCommand(consumer_key="c1", corporation_code="ACME")
            )
        assert async_to_sync(license_key_repository.count_free)() == 2
        assert ClientAttachmentModel.objects.filter(consumer_key="c1").count() == 1

    def test_racing_link_is_rejected_and_key_released(
        self, db_corporation, db_license_keys, link, license_key_repository
    ):
        """Test the losing link frees the key it acquired."""
        link("c1", "K1")
        racing = LinkClientHandler(StaleReadCorporationRepository(), license_key_repository)

        with pytest.raises(ClientAlreadyLinkedError):
            async_to_sync(racing.handle)(
                LinkClientCommand(consumer_key="c1", corporation_code="ACME", license_key="K2")
            )
        assert async_to_sync(license_key_repository.find_by_key)("K2").used is False
        assert ClientAttachmentModel.objects.filter(consumer_key="c1").count() == 1


@pytest.mark.django_db
@pytest.mark.integration
class TestLinks:
    """Paid links and period continuity."""

    def test_link_fresh_key(self, db_corporation, db_license_keys, link):
        """Test a first link lasts 365 days."""
        result = link("c2", "K1")

        assert result.is_demo is False
        assert result.end_date - result.begin_date == timedelta(days=365)
        assert result.remain_days == 365

    def test_relink_reuses_period(self, db_corporation, db_license_keys, link, unlink):
        """Test unlink then link with the same key keeps the window."""
        first = link("c2", "K1")
        unlink("c2")

        second = link("c3", "K1")

        assert second.begin_date == first.begin_date
        assert second.end_date == first.end_date
        assert second.is_demo is False

    def test_relink_in_other_corporation_is_fresh(
        self, db_corporation, db_license_keys, corporation_repository, link, unlink
    ):
        """Test continuity is scoped to the corporation."""
        async_to_sync(CreateCorporationHandler(corporation_repository).handle)(
            CreateCorporationCommand(code="OTHER")
        )
        link("c2", "K1")
        unlink("c2")

        later = link("c3", "K1", code="OTHER")

        assert later.remain_days == 365

    def test_link_used_key(self, db_corporation, db_license_keys, link):
        """Test a used key cannot be linked."""
        link("c2", "K1")

        with pytest.raises(LicenseKeyNotFoundError):
            link("c3", "K1")

    def test_link_unknown_key(self, db_corporation, db_license_keys, link):
        """Test an unknown key is not found."""
        with pytest.raises(LicenseKeyNotFoundError):
            link("c2", "K9")

    def test_link_while_linked(
        self, db_corporation, db_license_keys, link, license_key_repository
    ):
        """Test a linked consumer cannot link again and keeps the inventory intact."""
        link("c2", "K1")

        with pytest.raises(ClientAlreadyLinkedError):
            link("c2", "K2")
        assert async_to_sync(license_key_repository.find_by_key)("K2").used is False

    def test_unlink_unknown_consumer(self, db_corporation, unlink):
        """Test unlinking a consumer with no attachment."""
        with pytest.raises(ClientNotFoundError):
            unlink("c9")

    def test_client_status(self, db_corporation, db_license_keys, corporation_repository, link):
        """Test the status of a linked consumer."""
        link("c2", "K1")

        status = async_to_sync(GetClientStatusHandler(corporation_repository).handle)(
            GetClientStatusQuery(consumer_key="c2")
        )

        assert status.corporation.code == "ACME"
        assert status.license_key == "K1"
        assert status.end_date - status.begin_date == timedelta(days=365)
        assert status.remain_days == 364

    def test_active_clients_count(
        self, db_corporation, db_license_keys, corporation_repository, link, grant_demo, unlink
    ):
        """Test the public view counts active attachments."""
        link("c2", "K1")
        grant_demo("c3")
        unlink("c2")

        view = async_to_sync(GetCorporationHandler(corporation_repository).handle)(
            GetCorporationQuery(code="ACME")
        )

        assert view.active_clients == 1


@pytest.mark.django_db
@pytest.mark.integration
class TestClientTokens:
    """Client tokens issued to entitled consumers."""

    def test_issue_and_validate(
        self, db_corporation, db_license_keys, grant_demo, issue_token, validate_token
    ):
        """Test a fresh token resolves to its holder and survives validation."""
        grant_demo("c1")
        issued = issue_token("c1")

        assert len(issued.token) == 32
        assert issued.expires_at - issued.given_at == timedelta(minutes=20)
        assert validate_token(issued.token).consumer_key == "c1"
        assert validate_token(issued.token).consumer_key == "c1"

    def test_new_token_replaces_old(
        self, db_corporation, db_license_keys, grant_demo, issue_token, validate_token
    ):
        """Test reissuing invalidates the previous token."""
        grant_demo("c1")
        first = issue_token("c1")
        second = issue_token("c1")

        with pytest.raises(TokenNotFoundError):
            validate_token(first.token)
        assert validate_token(second.token).consumer_key == "c1"

    def test_expiry_boundary(
        self, db_corporation, db_license_keys, corporation_repository, grant_demo, validate_token
    ):
        """Test a token works just before its end date and not after."""
        grant_demo("c1")
        _, attachment = async_to_sync(corporation_repository.find_active_attachment)("c1")
        now = timezone.now()

        async_to_sync(corporation_repository.set_token)(
            attachment.id, "a" * 32, now - timedelta(minutes=20), now + timedelta(minutes=1)
        )
        assert validate_token("a" * 32).consumer_key == "c1"

        async_to_sync(corporation_repository.set_token)(
            attachment.id, "a" * 32, now - timedelta(minutes=20), now
        )
        with pytest.raises(TokenNotFoundError):
            validate_token("a" * 32)

    def test_token_dies_with_unlink(
        self, db_corporation, db_license_keys, grant_demo, issue_token, validate_token, unlink
    ):
        """Test an unlinked attachment's token stops working."""
        grant_demo("c1")
        issued = issue_token("c1")
        unlink("c1")

        with pytest.raises(TokenNotFoundError):
            validate_token(issued.token)

    def test_unlinked_consumer_gets_no_token(self, db_corporation, issue_token):
        """Test only linked consumers receive tokens."""
        with pytest.raises(ClientNotFoundError):
            issue_token("c9")

    def test_expired_period_gets_no_token(
        self, db_corporation, db_license_keys, corporation_repository, link, issue_token
    ):
        """Test a consumer past its period receives no token."""
        link("c1", "K1")
        _, attachment = async_to_sync(corporation_repository.find_active_attachment)("c1")

        EntitlementPeriodModel.objects.filter(attachment_id=attachment.id).update(
            begin_date=timezone.now() - timedelta(days=2),
            end_date=timezone.now() - timedelta(days=1),
        )

        with pytest.raises(ClientNotFoundError):
            issue_token("c1")

    def test_update_via_token(
        self, db_corporation, db_license_keys, corporation_repository, grant_demo, issue_token
    ):
        """Test a token holder updates its own corporation."""
        grant_demo("c1")
        issued = issue_token("c1")

        result = async_to_sync(UpdateClientViaTokenHandler(corporation_repository).handle)(
            UpdateClientViaTokenCommand(token=issued.token, changes={"town": "Shelbyville"})
        )

        assert result.code == "ACME"
        assert result.town == "Shelbyville"

    def test_update_via_token_cannot_ban(
        self, db_corporation, db_license_keys, corporation_repository, grant_demo, issue_token
    ):
        """Test token holders cannot change the banned flag."""
        grant_demo("c1")
        issued = issue_token("c1")

        with pytest.raises(AuthorizationError):
            async_to_sync(UpdateClientViaTokenHandler(corporation_repository).handle)(
                UpdateClientViaTokenCommand(token=issued.token, changes={"banned": True})
            )


@pytest.mark.django_db
@pytest.mark.integration
class TestCorporationDirectory:
    """Corporation create, read and update."""

    def test_create(self, corporation_repository):
        """Test creating a corporation."""
        result = async_to_sync(CreateCorporationHandler(corporation_repository).handle)(
            CreateCorporationCommand(code="ACME", description="Acme Corp", city="Capital")
        )

        assert result.code == "ACME"
        assert result.city == "Capital"
        assert result.active_clients == 0

    def test_create_without_code(self, corporation_repository):
        """Test a code is required."""
        with pytest.raises(CodeUnspecifiedError):
            async_to_sync(CreateCorporationHandler(corporation_repository).handle)(
                CreateCorporationCommand(code=None)
            )

    def test_create_duplicate_code(self, db_corporation, corporation_repository):
        """Test codes are unique."""
        with pytest.raises(CodeAlreadyUsedError):
            async_to_sync(CreateCorporationHandler(corporation_repository).handle)(
                CreateCorporationCommand(code="ACME")
            )

    def test_get_unknown(self, corporation_repository):
        """Test an unknown code is not found."""
        with pytest.raises(CorporationNotFoundError):
            async_to_sync(GetCorporationHandler(corporation_repository).handle)(
                GetCorporationQuery(code="NOPE")
            )

    def test_get_reflects_updates(self, db_corporation, corporation_repository):
        """Test the cached view is refreshed after an update."""
        get = GetCorporationHandler(corporation_repository)
        async_to_sync(get.handle)(GetCorporationQuery(code="ACME"))

        async_to_sync(UpdateCorporationHandler(corporation_repository).handle)(
            UpdateCorporationCommand(
                changes={"description": "New"}, target_code="ACME", is_admin=True
            )
        )

        assert async_to_sync(get.handle)(GetCorporationQuery(code="ACME")).description == "New"

    def test_self_service_update_requires_attachment(
        self, db_corporation, corporation_repository
    ):
        """Test a consumer without attachment cannot update."""
        with pytest.raises(ClientNotFoundError):
            async_to_sync(UpdateCorporationHandler(corporation_repository).handle)(
                UpdateCorporationCommand(changes={"town": "X"}, consumer_key="c9")
            )

    def test_rename_to_taken_code(self, db_corporation, corporation_repository):
        """Test renaming checks uniqueness excluding self."""
        create = CreateCorporationHandler(corporation_repository)
        async_to_sync(create.handle)(CreateCorporationCommand(code="OTHER"))
        update = UpdateCorporationHandler(corporation_repository)

        with pytest.raises(CodeAlreadyUsedError):
            async_to_sync(update.handle)(
                UpdateCorporationCommand(
                    changes={"code": "OTHER"}, target_code="ACME", is_admin=True
                )
            )

        renamed = async_to_sync(update.handle)(
            UpdateCorporationCommand(changes={"code": "ACME"}, target_code="ACME", is_admin=True)
        )
        assert renamed.code == "ACME"

    def test_admin_ban(self, db_corporation, corporation_repository):
        """Test administrators can ban."""
        result = async_to_sync(UpdateCorporationHandler(corporation_repository).handle)(
            UpdateCorporationCommand(changes={"banned": True}, target_code="ACME", is_admin=True)
        )

        assert result.banned is True
