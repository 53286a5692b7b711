"""
Corporation DTOs for API responses.
"""
import uuid
from dataclasses import asdict, dataclass
from typing import Any, Dict

from corporations.domain.corporation import Corporation


@dataclass
class CorporationProfileDTO:
    """Public-safe corporation fields."""

    code: str
    description: str
    town: str
    city: str
    banned: bool

    @classmethod
    def from_entity(cls, corporation: Corporation) -> "CorporationProfileDTO":
        """Build from a Corporation entity."""
        return cls(
            code=corporation.code,
            description=corporation.description,
            town=corporation.town,
            city=corporation.city,
            banned=corporation.banned,
        )


@dataclass
class CorporationDTO:
    """DTO for the public corporation view."""

    id: uuid.UUID
    code: str
    description: str
    town: str
    city: str
    banned: bool
    active_clients: int

    @classmethod
    def from_entity(cls, corporation: Corporation) -> "CorporationDTO":
        """Build from a Corporation entity."""
        return cls(
            id=corporation.id,
            code=corporation.code,
            description=corporation.description,
            town=corporation.town,
            city=corporation.city,
            banned=corporation.banned,
            active_clients=corporation.active_clients,
        )

    def to_cache(self) -> Dict[str, Any]:
        """Serialize for the cache."""
        data = asdict(self)
        data["id"] = str(self.id)
        return data

    @classmethod
    def from_cache(cls, data: Dict[str, Any]) -> "CorporationDTO":
        """Deserialize from the cache."""
        return cls(**{**data, "id": uuid.UUID(data["id"])})
