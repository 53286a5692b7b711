"""
Django implementation of LicenseKeyRepository port.

This adapter converts between domain entities and Django ORM models.
Acquisition is a compare-and-set on the used flag: an UPDATE that
only matches rows still free.
"""
import logging
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.utils import timezone

from core.infrastructure.database import storage_errors
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.models import (
    LicenseKey as LicenseKeyModel,
)
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class DjangoLicenseKeyRepository(LicenseKeyRepository):
    """Django ORM implementation of LicenseKeyRepository."""

    def _to_domain(self, model: LicenseKeyModel) -> LicenseKey:
        """
        Convert Django model to domain entity.

        Args:
            model: Django LicenseKey model

        Returns:
            LicenseKey domain entity
        """
        return LicenseKey(
            id=model.id,
            key=model.key,
            used=model.used,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, license_key: LicenseKey) -> LicenseKeyModel:
        """
        Convert domain entity to Django model.

        Args:
            license_key: LicenseKey domain entity

        Returns:
            Django LicenseKey model
        """
        model, created = LicenseKeyModel.objects.get_or_create(
            id=license_key.id,
            defaults={
                "key": license_key.key,
                "used": license_key.used,
            },
        )
        if not created:
            model.key = license_key.key
            model.used = license_key.used
        return model

    @sync_to_async
    def save(self, license_key: LicenseKey) -> LicenseKey:
        """
        Save a license key entity.

        Args:
            license_key: LicenseKey entity to save

        Returns:
            Saved license key entity
        """
        with storage_errors("save license key"):
            model = self._to_model(license_key)
            model.save()
            return self._to_domain(model)

    @sync_to_async
    def save_many(self, license_keys: List[LicenseKey]) -> int:
        """
        Insert license keys in bulk.

        Keys that collide with existing values are skipped.

        Args:
            license_keys: LicenseKey entities to insert

        Returns:
            Number of keys inserted
        """
        models = [
            LicenseKeyModel(id=license_key.id, key=license_key.key, used=license_key.used)
            for license_key in license_keys
        ]
        with storage_errors("insert license keys"):
            before = LicenseKeyModel.objects.count()
            LicenseKeyModel.objects.bulk_create(models, ignore_conflicts=True)
            return LicenseKeyModel.objects.count() - before

    @sync_to_async
    def find_by_key(self, key: str) -> Optional[LicenseKey]:
        """
        Find a license key by key string.

        Args:
            key: License key string

        Returns:
            LicenseKey entity or None if not found
        """
        with storage_errors("find license key"):
            try:
                model = LicenseKeyModel.objects.get(key=key)
                return self._to_domain(model)
            except LicenseKeyModel.DoesNotExist:
                return None

    @sync_to_async
    def acquire_free(self) -> Optional[LicenseKey]:
        """
        Atomically pick one free key and flag it used.

        Candidates are tried oldest first. A candidate whose conditional
        update matches no row was taken by a concurrent caller, so the
        loop moves on to the next one.

        Returns:
            The acquired LicenseKey, or None if no free key remains
        """
        with storage_errors("acquire free license key"):
            while True:
                candidate_id = (
                    LicenseKeyModel.objects.filter(used=False)
                    .order_by("created_at", "id")
                    .values_list("id", flat=True)
                    .first()
                )
                if candidate_id is None:
                    return None

                updated = LicenseKeyModel.objects.filter(id=candidate_id, used=False).update(
                    used=True, updated_at=timezone.now()
                )
                if updated == 1:
                    return self._to_domain(LicenseKeyModel.objects.get(id=candidate_id))

                logger.debug("License key %s taken concurrently, retrying", candidate_id)

    @sync_to_async
    def acquire(self, key: str) -> Optional[LicenseKey]:
        """
        Atomically flag a specific key used if it is still free.

        Args:
            key: License key string

        Returns:
            The acquired LicenseKey, or None if absent or already used
        """
        with storage_errors("acquire license key"):
            updated = LicenseKeyModel.objects.filter(key=key, used=False).update(
                used=True, updated_at=timezone.now()
            )
            if updated != 1:
                return None
            return self._to_domain(LicenseKeyModel.objects.get(key=key))

    @sync_to_async
    def release(self, key: str) -> bool:
        """
        Flag a key free again.

        Args:
            key: License key string

        Returns:
            True if the key exists, False otherwise
        """
        with storage_errors("release license key"):
            updated = LicenseKeyModel.objects.filter(key=key).update(
                used=False, updated_at=timezone.now()
            )
        if not updated:
            logger.warning("Release of unknown license key %s...", key[:8])
        return bool(updated)

    @sync_to_async
    def count_free(self) -> int:
        """Count keys that are not used."""
        with storage_errors("count free license keys"):
            return LicenseKeyModel.objects.filter(used=False).count()

    @sync_to_async
    def count_used(self) -> int:
        """Count keys that are used."""
        with storage_errors("count used license keys"):
            return LicenseKeyModel.objects.filter(used=True).count()
