"""
IssueClientTokenCommand.

Command to issue a short-lived token to an entitled client.
"""

from dataclasses import dataclass


@dataclass
class IssueClientTokenCommand:
    """Command to issue a client token."""

    consumer_key: str
