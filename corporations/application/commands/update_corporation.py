"""
UpdateCorporationCommand.

Command to change a corporation profile, either self-service by a
linked client or by an administrator.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

MUTABLE_FIELDS = ("code", "description", "town", "city", "banned")


@dataclass
class UpdateCorporationCommand:
    """
    Command to update a corporation.

    Self-service callers set consumer_key; the target is the corporation
    of their active attachment. Administrators set target_code and
    is_admin. Only keys listed in MUTABLE_FIELDS are applied.
    """

    changes: Dict[str, object] = field(default_factory=dict)
    consumer_key: Optional[str] = None
    target_code: Optional[str] = None
    is_admin: bool = False

    def __post_init__(self):
        """Drop fields that may not be changed."""
        self.changes = {
            name: value
            for name, value in self.changes.items()
            if name in MUTABLE_FIELDS and value is not None
        }
