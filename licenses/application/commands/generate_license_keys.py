"""
GenerateLicenseKeysCommand.

Command to add free keys to the license inventory.
"""

from dataclasses import dataclass

from licenses.domain.license_key import DEFAULT_KEY_PREFIX


@dataclass
class GenerateLicenseKeysCommand:
    """Command to bulk-create free license keys."""

    count: int
    prefix: str = DEFAULT_KEY_PREFIX
