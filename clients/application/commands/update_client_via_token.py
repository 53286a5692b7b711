"""
UpdateClientViaTokenCommand.

Command for a token-authenticated client to update its corporation.
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class UpdateClientViaTokenCommand:
    """Command to update the token holder's corporation profile."""

    token: str
    changes: Dict[str, object] = field(default_factory=dict)
