"""
LinkClientCommand.

Command to link a consumer to a corporation with a specific license key.
"""

from dataclasses import dataclass


@dataclass
class LinkClientCommand:
    """Command to link a client with a paid license key."""

    consumer_key: str
    corporation_code: str
    license_key: str
