"""
Client DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import EntitlementPeriod
from corporations.application.dto.corporation_dto import CorporationProfileDTO
from corporations.domain.client_attachment import ClientAttachment
from corporations.domain.corporation import Corporation


@dataclass
class EntitlementDTO:
    """DTO for the period granted by a demo or link."""

    license_key: str
    begin_date: datetime
    end_date: datetime
    is_demo: bool
    remain_days: int

    @classmethod
    def from_period(
        cls, license_key: str, period: EntitlementPeriod, now: datetime
    ) -> "EntitlementDTO":
        """Build from a period."""
        return cls(
            license_key=license_key,
            begin_date=period.begin_date,
            end_date=period.end_date,
            is_demo=period.is_demo,
            remain_days=period.remaining_days(now),
        )


@dataclass
class ClientStatusDTO:
    """DTO for a client's active attachment."""

    consumer_key: str
    corporation: CorporationProfileDTO
    license_key: str
    begin_date: Optional[datetime]
    end_date: Optional[datetime]
    is_demo: bool
    remain_days: int

    @classmethod
    def from_entities(
        cls, corporation: Corporation, attachment: ClientAttachment, now: datetime
    ) -> "ClientStatusDTO":
        """Build from a corporation and one of its attachments."""
        period = attachment.current_period
        return cls(
            consumer_key=attachment.consumer_key,
            corporation=CorporationProfileDTO.from_entity(corporation),
            license_key=attachment.license_key,
            begin_date=period.begin_date if period else None,
            end_date=period.end_date if period else None,
            is_demo=period.is_demo if period else False,
            remain_days=period.remaining_days(now) if period else 0,
        )


@dataclass
class UnlinkedClientDTO:
    """DTO for an unlink result."""

    consumer_key: str
    license_key: str
    unlink_date: datetime


@dataclass
class ClientTokenDTO:
    """DTO for an issued client token."""

    token: str
    given_at: datetime
    expires_at: datetime
