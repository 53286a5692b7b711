"""
License inventory DTOs.
"""
from dataclasses import dataclass, field
from typing import List


@dataclass
class InventoryDTO:
    """DTO for inventory counters."""

    free: int
    used: int

    @property
    def total(self) -> int:
        """Total number of keys."""
        return self.free + self.used


@dataclass
class GeneratedLicenseKeysDTO:
    """DTO for a generation batch."""

    created: int
    keys: List[str] = field(default_factory=list)
