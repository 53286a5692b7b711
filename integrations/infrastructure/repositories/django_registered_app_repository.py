"""
Django implementation of RegisteredAppRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from datetime import datetime
from typing import Optional

from asgiref.sync import sync_to_async
from django.core.exceptions import ValidationError

from core.infrastructure.database import storage_errors
from integrations.domain.registered_app import RegisteredApp
from integrations.infrastructure.models import RegisteredApp as RegisteredAppModel
from integrations.ports.registered_app_repository import RegisteredAppRepository


class DjangoRegisteredAppRepository(RegisteredAppRepository):
    """Django ORM implementation of RegisteredAppRepository."""

    def _to_domain(self, model: RegisteredAppModel) -> RegisteredApp:
        """
        Convert Django model to domain entity.

        Args:
            model: Django RegisteredApp model

        Returns:
            RegisteredApp domain entity
        """
        return RegisteredApp(
            id=model.id,
            name=model.name,
            key_prefix=model.key_prefix,
            key_hash=model.key_hash,
            is_admin=model.is_admin,
            created_at=model.created_at,
            last_used_at=model.last_used_at,
        )

    def _to_model(self, app: RegisteredApp) -> RegisteredAppModel:
        """
        Convert domain entity to Django model.

        Args:
            app: RegisteredApp domain entity

        Returns:
            Django RegisteredApp model
        """
        # pylint: disable=no-member
        model, created = RegisteredAppModel.objects.get_or_create(
            id=app.id,
            defaults={
                "name": app.name,
                "key_prefix": app.key_prefix,
                "key_hash": app.key_hash,
                "is_admin": app.is_admin,
                "last_used_at": app.last_used_at,
            },
        )
        if not created:
            model.name = app.name
            model.is_admin = app.is_admin
            model.last_used_at = app.last_used_at
        return model

    @sync_to_async
    def save(self, app: RegisteredApp) -> RegisteredApp:
        """
        Save a registered app entity.

        Args:
            app: RegisteredApp entity to save

        Returns:
            Saved app entity
        """
        with storage_errors("save registered app"):
            model = self._to_model(app)
            model.save()
            return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, app_id: uuid.UUID) -> Optional[RegisteredApp]:
        """
        Find a registered app by ID.

        Args:
            app_id: App UUID

        Returns:
            RegisteredApp entity or None if not found
        """
        with storage_errors("find registered app"):
            try:
                # pylint: disable=no-member
                model = RegisteredAppModel.objects.get(id=app_id)
            except (RegisteredAppModel.DoesNotExist, ValidationError):
                return None
            return self._to_domain(model)

    @sync_to_async
    def touch(self, app_id: uuid.UUID, used_at: datetime) -> None:
        """Record the last successful authentication of an app."""
        with storage_errors("touch registered app"):
            # pylint: disable=no-member
            RegisteredAppModel.objects.filter(id=app_id).update(last_used_at=used_at)
