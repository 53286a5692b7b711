"""
GetClientStatusQuery.

Query to get a consumer's active attachment and entitlement.
"""
from dataclasses import dataclass


@dataclass
class GetClientStatusQuery:
    """Query to get client status by consumer key."""

    consumer_key: str
