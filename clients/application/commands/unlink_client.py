"""
UnlinkClientCommand.

Command to disable a consumer's active attachment.
"""

from dataclasses import dataclass


@dataclass
class UnlinkClientCommand:
    """Command to unlink a client."""

    consumer_key: str
