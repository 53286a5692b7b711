"""
GetCorporationQuery.

Query to get the public view of a corporation.
"""
from dataclasses import dataclass


@dataclass
class GetCorporationQuery:
    """Query to get a corporation by code."""

    code: str
