"""
CreateCorporationCommand.

Command to register a new corporation.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CreateCorporationCommand:
    """Command to create a corporation."""

    code: Optional[str]
    description: str = ""
    town: str = ""
    city: str = ""
