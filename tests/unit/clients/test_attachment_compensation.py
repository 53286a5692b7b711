"""
Unit tests for demo, link and unlink handlers against stub repositories.
"""
import logging
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from clients.application.commands.grant_demo import GrantDemoCommand
from clients.application.commands.link_client import LinkClientCommand
from clients.application.commands.unlink_client import UnlinkClientCommand
from clients.application.handlers.grant_demo_handler import GrantDemoHandler
from clients.application.handlers.link_client_handler import LinkClientHandler
from clients.application.handlers.unlink_client_handler import UnlinkClientHandler
from clients.domain.services import EntitlementPolicy
from core.domain.exceptions import (
    ClientAlreadyLinkedError,
    ClientNotSuitableError,
    ConsumerKeyUnspecifiedError,
    CorporationNotFoundError,
    LicenseKeyNotFoundError,
    LicenseKeysOverError,
    StorageError,
)
from core.domain.value_objects import EntitlementPeriod
from corporations.domain.client_attachment import ClientAttachment
from corporations.domain.corporation import Corporation
from licenses.domain.license_key import LicenseKey


@pytest.fixture
def corporation():
    return Corporation.create(code="ACME")


@pytest.fixture
def corporation_repo(corporation):
    """Stub corporation repository holding one unlinked consumer."""
    repo = AsyncMock()
    repo.find_active_attachment.return_value = None
    repo.has_any_attachment.return_value = False
    repo.find_by_code.return_value = corporation
    repo.find_latest_unlinked.return_value = None
    repo.add_attachment.side_effect = lambda attachment: attachment
    return repo


@pytest.fixture
def license_repo():
    """Stub license key repository with one free key."""
    repo = AsyncMock()
    repo.acquire_free.return_value = LicenseKey.create(key="K1").mark_used()
    repo.acquire.return_value = LicenseKey.create(key="K1").mark_used()
    repo.release.return_value = True
    return repo


@pytest.mark.asyncio
class TestGrantDemoHandler:
    """Tests for GrantDemoHandler."""

    async def test_grant_demo(self, corporation_repo, license_repo):
        """Test a demo takes a free key and lasts 30 days."""
        handler = GrantDemoHandler(corporation_repo, license_repo, EntitlementPolicy())

        result = await handler.handle(GrantDemoCommand(consumer_key="C1", corporation_code="ACME"))

        assert result.license_key == "K1"
        assert result.is_demo is True
        assert result.remain_days == 30
        license_repo.release.assert_not_awaited()

    async def test_blank_consumer_key(self, corporation_repo, license_repo):
        """Test a consumer key is required."""
        handler = GrantDemoHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(ConsumerKeyUnspecifiedError):
            await handler.handle(GrantDemoCommand(consumer_key=" ", corporation_code="ACME"))
        license_repo.acquire_free.assert_not_awaited()

    async def test_attached_consumer_is_not_suitable(self, corporation_repo, license_repo):
        """Test a consumer with any attachment history gets no demo."""
        corporation_repo.has_any_attachment.return_value = True
        handler = GrantDemoHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(ClientNotSuitableError):
            await handler.handle(GrantDemoCommand(consumer_key="C1", corporation_code="ACME"))
        license_repo.acquire_free.assert_not_awaited()

    async def test_banned_corporation(self, corporation_repo, license_repo, corporation):
        """Test a banned corporation is reported as not found."""
        corporation_repo.find_by_code.return_value = corporation.update_profile(banned=True)
        handler = GrantDemoHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(CorporationNotFoundError):
            await handler.handle(GrantDemoCommand(consumer_key="C1", corporation_code="ACME"))
        license_repo.acquire_free.assert_not_awaited()

    async def test_inventory_exhausted(self, corporation_repo, license_repo):
        """Test an empty inventory stops the grant before any attachment."""
        license_repo.acquire_free.return_value = None
        handler = GrantDemoHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(LicenseKeysOverError):
            await handler.handle(GrantDemoCommand(consumer_key="C1", corporation_code="ACME"))
        corporation_repo.add_attachment.assert_not_awaited()

    async def test_failed_attachment_releases_key(self, corporation_repo, license_repo):
        """Test the key goes back to the inventory when the attachment fails."""
        corporation_repo.add_attachment.side_effect = StorageError()
        handler = GrantDemoHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(StorageError):
            await handler.handle(GrantDemoCommand(consumer_key="C1", corporation_code="ACME"))
        license_repo.release.assert_awaited_once_with("K1")

    async def test_concurrent_link_releases_key(self, corporation_repo, license_repo):
        """Test losing the active-consumer race releases the key."""
        corporation_repo.add_attachment.side_effect = ClientAlreadyLinkedError()
        handler = GrantDemoHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(ClientNotSuitableError):
            await handler.handle(GrantDemoCommand(consumer_key="C1", corporation_code="ACME"))
        license_repo.release.assert_awaited_once_with("K1")

    async def test_failed_release_keeps_original_error(self, corporation_repo, license_repo):
        """Test a failing compensation does not mask the attachment error."""
        corporation_repo.add_attachment.side_effect = StorageError("insert failed")
        license_repo.release.side_effect = StorageError("release failed")
        handler = GrantDemoHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(StorageError, match="insert failed"):
            await handler.handle(GrantDemoCommand(consumer_key="C1", corporation_code="ACME"))


@pytest.mark.asyncio
class TestLinkClientHandler:
    """Tests for LinkClientHandler."""

    async def test_link_fresh_key(self, corporation_repo, license_repo):
        """Test a first link lasts 365 days."""
        handler = LinkClientHandler(corporation_repo, license_repo, EntitlementPolicy())

        result = await handler.handle(
            LinkClientCommand(consumer_key="C1", corporation_code="ACME", license_key="K1")
        )

        assert result.license_key == "K1"
        assert result.is_demo is False
        assert result.remain_days == 365

    async def test_used_key(self, corporation_repo, license_repo):
        """Test a key that cannot be acquired is not found."""
        license_repo.acquire.return_value = None
        handler = LinkClientHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(LicenseKeyNotFoundError):
            await handler.handle(
                LinkClientCommand(consumer_key="C1", corporation_code="ACME", license_key="K1")
            )
        corporation_repo.add_attachment.assert_not_awaited()

    async def test_linked_consumer(self, corporation_repo, license_repo, corporation):
        """Test a consumer with an active attachment cannot link again."""
        corporation_repo.find_active_attachment.return_value = (corporation, object())
        handler = LinkClientHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(ClientAlreadyLinkedError):
            await handler.handle(
                LinkClientCommand(consumer_key="C1", corporation_code="ACME", license_key="K1")
            )
        license_repo.acquire.assert_not_awaited()

    async def test_failed_history_lookup_releases_key(self, corporation_repo, license_repo):
        """Test the key is released when the continuity lookup fails."""
        corporation_repo.find_latest_unlinked.side_effect = StorageError()
        handler = LinkClientHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(StorageError):
            await handler.handle(
                LinkClientCommand(consumer_key="C1", corporation_code="ACME", license_key="K1")
            )
        license_repo.release.assert_awaited_once_with("K1")

    async def test_failed_attachment_releases_key(self, corporation_repo, license_repo):
        """Test the key is released when the attachment fails."""
        corporation_repo.add_attachment.side_effect = ClientAlreadyLinkedError()
        handler = LinkClientHandler(corporation_repo, license_repo, EntitlementPolicy())

        with pytest.raises(ClientAlreadyLinkedError):
            await handler.handle(
                LinkClientCommand(consumer_key="C1", corporation_code="ACME", license_key="K1")
            )
        license_repo.release.assert_awaited_once_with("K1")


@pytest.fixture
def linked_attachment(corporation):
    now = datetime(2024, 3, 1, tzinfo=timezone.utc)
    return ClientAttachment.create(
        corporation_id=corporation.id,
        consumer_key="C1",
        license_key="K1",
        period=EntitlementPeriod.starting(now, 365),
        now=now,
    )


@pytest.mark.asyncio
class TestUnlinkClientHandler:
    """Tests for UnlinkClientHandler."""

    async def test_unlink_releases_key(
        self, corporation_repo, license_repo, corporation, linked_attachment
    ):
        """Test unlinking disables the attachment and frees its key."""
        corporation_repo.find_active_attachment.return_value = (corporation, linked_attachment)
        corporation_repo.disable_active_attachment.return_value = linked_attachment.unlink()
        handler = UnlinkClientHandler(corporation_repo, license_repo)

        result = await handler.handle(UnlinkClientCommand(consumer_key="C1"))

        assert result.license_key == "K1"
        license_repo.release.assert_awaited_once_with("K1")

    async def test_failed_release_is_logged(
        self, corporation_repo, license_repo, corporation, linked_attachment, caplog
    ):
        """Test a release failure after the unlink committed is logged, not raised."""
        corporation_repo.find_active_attachment.return_value = (corporation, linked_attachment)
        corporation_repo.disable_active_attachment.return_value = linked_attachment.unlink()
        license_repo.release.side_effect = StorageError("release failed")
        handler = UnlinkClientHandler(corporation_repo, license_repo)

        with caplog.at_level(logging.ERROR):
            result = await handler.handle(UnlinkClientCommand(consumer_key="C1"))

        assert result.license_key == "K1"
        assert "key stays used" in caplog.text
