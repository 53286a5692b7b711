"""
Integration DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime


@dataclass
class SessionDTO:
    """DTO for an app session."""

    token: str
    expires_at: datetime


@dataclass
class RegisteredAppDTO:
    """DTO for a newly registered app. raw_key is never stored."""

    id: uuid.UUID
    name: str
    is_admin: bool
    raw_key: str
