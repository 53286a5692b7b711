"""
Registered app repository port (interface).

This defines the contract for registered app persistence operations.
Implementations are in the infrastructure layer.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from integrations.domain.registered_app import RegisteredApp


class RegisteredAppRepository(ABC):
    """Abstract repository for RegisteredApp entities."""

    @abstractmethod
    async def save(self, app: RegisteredApp) -> RegisteredApp:
        """
        Save a registered app entity.

        Args:
            app: RegisteredApp entity to save

        Returns:
            Saved app entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, app_id: uuid.UUID) -> Optional[RegisteredApp]:
        """
        Find a registered app by ID.

        Args:
            app_id: App UUID

        Returns:
            RegisteredApp entity or None if not found
        """
        pass

    @abstractmethod
    async def touch(self, app_id: uuid.UUID, used_at: datetime) -> None:
        """Record the last successful authentication of an app."""
        pass
