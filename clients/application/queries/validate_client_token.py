"""
ValidateClientTokenQuery.

Query to resolve a client token to its attachment.
"""
from dataclasses import dataclass


@dataclass
class ValidateClientTokenQuery:
    """Query to validate a client token."""

    token: str
