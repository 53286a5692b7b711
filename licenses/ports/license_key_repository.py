"""
LicenseKey repository port (interface).

This defines the contract for license inventory operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from licenses.domain.license_key import LicenseKey


class LicenseKeyRepository(ABC):
    """
    Abstract repository for LicenseKey entities.

    acquire_free and acquire must be atomic with respect to concurrent
    callers: a key is handed out to at most one of them.
    """

    @abstractmethod
    async def save(self, license_key: LicenseKey) -> LicenseKey:
        """
        Save a license key entity.

        Args:
            license_key: LicenseKey entity to save

        Returns:
            Saved license key entity
        """
        pass

    @abstractmethod
    async def save_many(self, license_keys: List[LicenseKey]) -> int:
        """
        Insert license keys in bulk.

        Args:
            license_keys: LicenseKey entities to insert

        Returns:
            Number of keys inserted
        """
        pass

    @abstractmethod
    async def find_by_key(self, key: str) -> Optional[LicenseKey]:
        """
        Find a license key by key string.

        Args:
            key: License key string

        Returns:
            LicenseKey entity or None if not found
        """
        pass

    @abstractmethod
    async def acquire_free(self) -> Optional[LicenseKey]:
        """
        Atomically pick one free key and flag it used.

        Returns:
            The acquired LicenseKey, or None if no free key remains
        """
        pass

    @abstractmethod
    async def acquire(self, key: str) -> Optional[LicenseKey]:
        """
        Atomically flag a specific key used if it is still free.

        Args:
            key: License key string

        Returns:
            The acquired LicenseKey, or None if absent or already used
        """
        pass

    @abstractmethod
    async def release(self, key: str) -> bool:
        """
        Flag a key free again.

        Idempotent; a missing key is a no-op.

        Args:
            key: License key string

        Returns:
            True if the key exists, False otherwise
        """
        pass

    @abstractmethod
    async def count_free(self) -> int:
        """Count keys that are not used."""
        pass

    @abstractmethod
    async def count_used(self) -> int:
        """Count keys that are used."""
        pass
