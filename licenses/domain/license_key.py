"""
LicenseKey domain entity.

A license key is an inventory unit: free until a demo grant or a
link flags it used, free again after the holder unlinks. Keys are
never deleted.
"""

import secrets
import string
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

DEFAULT_KEY_PREFIX = "LIC"


def generate_license_key(prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """
    Generate a license key in format: PREFIX-XXXX-XXXX-XXXX-XXXX.

    Args:
        prefix: Key prefix (e.g., 'ACME')

    Returns:
        Generated license key string
    """
    chars = string.ascii_uppercase + string.digits
    parts = ["".join(secrets.choice(chars) for _ in range(4)) for _ in range(4)]
    return f"{prefix}-{'-'.join(parts)}"


@dataclass(frozen=True)
class LicenseKey:
    """
    LicenseKey domain entity.

    Transitions return new instances; persistence of the used flag
    goes through the repository's conditional updates.
    """

    id: uuid.UUID
    key: str
    used: bool
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate license key entity."""
        if not self.key or len(self.key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if len(self.key) > 100:
            raise ValueError("License key too long")

    @classmethod
    def create(
        cls,
        key: Optional[str] = None,
        prefix: str = DEFAULT_KEY_PREFIX,
        license_key_id: Optional[uuid.UUID] = None,
    ) -> "LicenseKey":
        """
        Create a new free LicenseKey entity.

        Args:
            key: Explicit key value (generated from prefix if omitted)
            prefix: Prefix used when generating the key
            license_key_id: Optional UUID (generated if not provided)

        Returns:
            LicenseKey entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=license_key_id or uuid.uuid4(),
            key=key or generate_license_key(prefix),
            used=False,
            created_at=now,
            updated_at=now,
        )

    def mark_used(self) -> "LicenseKey":
        """Return a copy flagged as used."""
        if self.used:
            return self
        return LicenseKey(
            id=self.id,
            key=self.key,
            used=True,
            created_at=self.created_at,
            updated_at=datetime.now(timezone.utc),
        )

    def release(self) -> "LicenseKey":
        """Return a copy flagged as free."""
        if not self.used:
            return self
        return LicenseKey(
            id=self.id,
            key=self.key,
            used=False,
            created_at=self.created_at,
            updated_at=datetime.now(timezone.utc),
        )
