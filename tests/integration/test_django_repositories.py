"""
Integration tests for repository implementations.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.utils import timezone

from core.domain.exceptions import ClientAlreadyLinkedError, CodeAlreadyUsedError
from core.domain.value_objects import EntitlementPeriod
from corporations.domain.client_attachment import ClientAttachment
from corporations.domain.corporation import Corporation
from corporations.infrastructure.models import ClientAttachment as ClientAttachmentModel
from integrations.domain.registered_app import RegisteredApp
from licenses.domain.license_key import LicenseKey


def _attachment(corporation, consumer_key="C1", license_key="K1", days=30, is_demo=True):
    now = timezone.now()
    return ClientAttachment.create(
        corporation_id=corporation.id,
        consumer_key=consumer_key,
        license_key=license_key,
        period=EntitlementPeriod.starting(now, days, is_demo=is_demo),
        now=now,
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseKeyRepository:
    """Integration tests for LicenseKeyRepository."""

    def test_save_many_skips_duplicates(self, license_key_repository, db_license_keys):
        """Test bulk insert ignores existing key values."""
        created = async_to_sync(license_key_repository.save_many)(
            [LicenseKey.create(key="K1"), LicenseKey.create(key="K4")]
        )

        assert created == 1
        assert async_to_sync(license_key_repository.count_free)() == 4

    def test_acquire_free_until_exhausted(self, license_key_repository, db_license_keys):
        """Test each free key is handed out once."""
        acquired = [
            async_to_sync(license_key_repository.acquire_free)() for _ in db_license_keys
        ]

        assert sorted(license_key.key for license_key in acquired) == sorted(db_license_keys)
        assert all(license_key.used for license_key in acquired)
        assert async_to_sync(license_key_repository.acquire_free)() is None
        assert async_to_sync(license_key_repository.count_used)() == 3

    def test_acquire_specific_key(self, license_key_repository, db_license_keys):
        """Test a named key can be acquired only while free."""
        first = async_to_sync(license_key_repository.acquire)("K2")
        second = async_to_sync(license_key_repository.acquire)("K2")

        assert first.key == "K2"
        assert first.used is True
        assert second is None
        assert async_to_sync(license_key_repository.acquire)("UNKNOWN") is None

    def test_release(self, license_key_repository, db_license_keys):
        """Test a released key becomes free again."""
        async_to_sync(license_key_repository.acquire)("K1")

        assert async_to_sync(license_key_repository.release)("K1") is True
        assert async_to_sync(license_key_repository.find_by_key)("K1").used is False
        assert async_to_sync(license_key_repository.release)("UNKNOWN") is False


@pytest.mark.django_db
@pytest.mark.integration
class TestCorporationRepository:
    """Integration tests for CorporationRepository."""

    def test_save_and_find(self, corporation_repository, db_corporation):
        """Test saving and finding a corporation."""
        found = async_to_sync(corporation_repository.find_by_code)("ACME")

        assert found.id == db_corporation.id
        assert found.description == "Acme Corp"
        assert found.active_clients == 0
        assert async_to_sync(corporation_repository.find_by_id)(db_corporation.id) is not None
        assert async_to_sync(corporation_repository.find_by_code)("NOPE") is None
        assert async_to_sync(corporation_repository.find_by_id)(uuid.uuid4()) is None

    def test_duplicate_code(self, corporation_repository, db_corporation):
        """Test the unique code index."""
        with pytest.raises(CodeAlreadyUsedError):
            async_to_sync(corporation_repository.save)(Corporation.create(code="ACME"))

    def test_code_exists(self, corporation_repository, db_corporation):
        """Test code lookups with exclusion."""
        assert async_to_sync(corporation_repository.code_exists)("ACME") is True
        assert (
            async_to_sync(corporation_repository.code_exists)(
                "ACME", exclude_id=db_corporation.id
            )
            is False
        )

    def test_add_and_find_active_attachment(self, corporation_repository, db_corporation):
        """Test an attachment is loaded with its periods."""
        saved = async_to_sync(corporation_repository.add_attachment)(_attachment(db_corporation))

        corporation, attachment = async_to_sync(corporation_repository.find_active_attachment)(
            "C1"
        )

        assert attachment.id == saved.id
        assert attachment.current_period.is_demo is True
        assert corporation.active_clients == 1
        assert async_to_sync(corporation_repository.find_active_attachment)("C2") is None

    def test_one_active_attachment_per_consumer(self, corporation_repository, db_corporation):
        """Test the partial unique index across corporations."""
        other = async_to_sync(corporation_repository.save)(Corporation.create(code="OTHER"))
        async_to_sync(corporation_repository.add_attachment)(_attachment(db_corporation))

        with pytest.raises(ClientAlreadyLinkedError):
            async_to_sync(corporation_repository.add_attachment)(
                _attachment(other, license_key="K2")
            )

    def test_disable_active_attachment(self, corporation_repository, db_corporation):
        """Test unlinking keeps the row and frees the consumer."""
        async_to_sync(corporation_repository.add_attachment)(_attachment(db_corporation))
        now = timezone.now()

        disabled = async_to_sync(corporation_repository.disable_active_attachment)("C1", now)

        assert disabled.disabled is True
        assert disabled.unlink_date == now
        assert async_to_sync(corporation_repository.find_active_attachment)("C1") is None
        assert async_to_sync(corporation_repository.disable_active_attachment)("C1", now) is None
        assert ClientAttachmentModel.objects.filter(consumer_key="C1").count() == 1

        # The consumer may attach again once disabled
        async_to_sync(corporation_repository.add_attachment)(
            _attachment(db_corporation, license_key="K2")
        )

    def test_find_latest_unlinked(self, corporation_repository, db_corporation):
        """Test the continuity lookup returns the latest unlink."""
        now = timezone.now()
        async_to_sync(corporation_repository.add_attachment)(
            _attachment(db_corporation, consumer_key="C1", days=365, is_demo=False)
        )
        async_to_sync(corporation_repository.disable_active_attachment)(
            "C1", now - timedelta(days=2)
        )
        async_to_sync(corporation_repository.add_attachment)(
            _attachment(db_corporation, consumer_key="C2", days=30)
        )
        async_to_sync(corporation_repository.disable_active_attachment)("C2", now)

        latest = async_to_sync(corporation_repository.find_latest_unlinked)(
            db_corporation.id, "K1"
        )

        assert latest.consumer_key == "C2"
        assert latest.current_period.duration == timedelta(days=30)
        assert (
            async_to_sync(corporation_repository.find_latest_unlinked)(db_corporation.id, "K9")
            is None
        )

    def test_tokens(self, corporation_repository, db_corporation):
        """Test storing, finding and clearing tokens."""
        saved = async_to_sync(corporation_repository.add_attachment)(_attachment(db_corporation))
        now = timezone.now()

        stored = async_to_sync(corporation_repository.set_token)(
            saved.id, "a" * 32, now, now + timedelta(minutes=20)
        )
        _, attachment = async_to_sync(corporation_repository.find_by_token)("a" * 32)

        assert stored is True
        assert attachment.id == saved.id
        assert attachment.has_valid_token("a" * 32, now) is True
        assert async_to_sync(corporation_repository.find_by_token)("b" * 32) is None

        assert async_to_sync(corporation_repository.clear_expired_tokens)(now) == 0
        assert (
            async_to_sync(corporation_repository.clear_expired_tokens)(
                now + timedelta(minutes=20)
            )
            == 1
        )
        assert async_to_sync(corporation_repository.find_by_token)("a" * 32) is None

    def test_set_token_on_disabled_attachment(self, corporation_repository, db_corporation):
        """Test tokens are only stored on active attachments."""
        saved = async_to_sync(corporation_repository.add_attachment)(_attachment(db_corporation))
        now = timezone.now()
        async_to_sync(corporation_repository.disable_active_attachment)("C1", now)

        stored = async_to_sync(corporation_repository.set_token)(
            saved.id, "a" * 32, now, now + timedelta(minutes=20)
        )

        assert stored is False


@pytest.mark.django_db
@pytest.mark.integration
class TestRegisteredAppRepository:
    """Integration tests for RegisteredAppRepository."""

    def test_save_and_find(self, app_repository):
        """Test saving and finding an app."""
        app, raw_key = RegisteredApp.register("Partner Portal")
        async_to_sync(app_repository.save)(app)

        found = async_to_sync(app_repository.find_by_id)(app.id)

        assert found.name == "Partner Portal"
        assert found.verify_key(raw_key) is True
        assert async_to_sync(app_repository.find_by_id)(uuid.uuid4()) is None

    def test_touch(self, app_repository, db_app):
        """Test last use is recorded."""
        app, _ = db_app
        now = timezone.now()

        async_to_sync(app_repository.touch)(app.id, now)

        assert async_to_sync(app_repository.find_by_id)(app.id).last_used_at == now
