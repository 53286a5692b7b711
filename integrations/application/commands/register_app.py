"""
RegisterAppCommand.
"""
from dataclasses import dataclass


@dataclass
class RegisterAppCommand:
    """Command to register an application."""

    name: str
    is_admin: bool = False
