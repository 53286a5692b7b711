"""
GrantDemoCommand.

Command to give a consumer a demo license in a corporation.
"""

from dataclasses import dataclass


@dataclass
class GrantDemoCommand:
    """Command to grant a demo license."""

    consumer_key: str
    corporation_code: str
