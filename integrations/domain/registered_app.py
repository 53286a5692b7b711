"""
RegisteredApp domain entity.

An application allowed to call the administrative API. The raw app
key is returned once at registration; only its hash is kept.
"""

import hashlib
import secrets
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional, Tuple


def hash_app_key(raw_key: str) -> str:
    """SHA-256 hex digest of a raw app key."""
    return hashlib.sha256(raw_key.encode()).hexdigest()


@dataclass(frozen=True)
class RegisteredApp:
    """
    RegisteredApp domain entity.

    Admin apps may ban corporations and address any corporation by
    code; other apps act on behalf of a consumer.
    """

    id: uuid.UUID
    name: str
    key_prefix: str
    key_hash: str
    is_admin: bool
    created_at: datetime
    last_used_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate app entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("App name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("App name too long")
        if len(self.key_hash) != 64:
            raise ValueError("Invalid app key hash")

    @classmethod
    def register(
        cls, name: str, is_admin: bool = False, app_id: Optional[uuid.UUID] = None
    ) -> Tuple["RegisteredApp", str]:
        """
        Create a new app with a freshly generated key.

        Args:
            name: Human readable app name
            is_admin: Whether the app gets administrative rights
            app_id: Optional UUID (generated if not provided)

        Returns:
            Tuple of (RegisteredApp, raw app key)
        """
        raw_key = secrets.token_urlsafe(32)
        app = cls(
            id=app_id or uuid.uuid4(),
            name=name.strip() if name else name,
            key_prefix=raw_key[:8],
            key_hash=hash_app_key(raw_key),
            is_admin=is_admin,
            created_at=datetime.now(timezone.utc),
        )
        return app, raw_key

    def verify_key(self, raw_key: str) -> bool:
        """
        Verify a raw app key against the stored hash.

        Args:
            raw_key: The raw app key to verify

        Returns:
            True if key matches, False otherwise
        """
        if not raw_key:
            return False
        return secrets.compare_digest(self.key_hash, hash_app_key(raw_key))

    def mark_used(self, now: Optional[datetime] = None) -> "RegisteredApp":
        """Return a copy with last_used_at updated."""
        return replace(self, last_used_at=now or datetime.now(timezone.utc))
