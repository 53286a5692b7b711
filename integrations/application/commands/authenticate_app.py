"""
AuthenticateAppCommand.
"""
from dataclasses import dataclass


@dataclass
class AuthenticateAppCommand:
    """Command to exchange an app id and key for a session."""

    app_id: str
    app_key: str
