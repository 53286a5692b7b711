"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import math
from abc import ABC
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.domain.exceptions import CodeUnspecifiedError


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class CorporationCode(ValueObject):
    """Corporation code value object."""

    value: str

    def __post_init__(self):
        """Normalize and validate code."""
        if self.value is None or not str(self.value).strip():
            raise CodeUnspecifiedError()
        object.__setattr__(self, "value", str(self.value).strip())

    def __str__(self) -> str:
        """Return code as string."""
        return self.value


@dataclass(frozen=True)
class EntitlementPeriod(ValueObject):
    """
    Time window during which an attachment is entitled to access.

    The window is half-open: entitled while begin_date <= now < end_date.
    """

    begin_date: datetime
    end_date: datetime
    is_demo: bool = False

    def __post_init__(self):
        """Validate period bounds."""
        if self.begin_date is None or self.end_date is None:
            raise ValueError("Entitlement period requires both dates")
        if self.end_date <= self.begin_date:
            raise ValueError("Entitlement period must end after it begins")

    @classmethod
    def starting(cls, begin_date: datetime, days: int, is_demo: bool = False) -> "EntitlementPeriod":
        """Build a period of `days` whole days starting at begin_date."""
        return cls(
            begin_date=begin_date,
            end_date=begin_date + timedelta(days=days),
            is_demo=is_demo,
        )

    @property
    def duration(self) -> timedelta:
        """Length of the window."""
        return self.end_date - self.begin_date

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the window has closed."""
        now = now or datetime.now(timezone.utc)
        return now >= self.end_date

    def remaining_days(self, now: Optional[datetime] = None) -> int:
        """
        Whole days until end_date.

        Truncated toward zero, so a window that closed a few hours ago
        reports 0 and one that closed two and a half days ago reports -2.
        """
        now = now or datetime.now(timezone.utc)
        seconds = (self.end_date - now).total_seconds()
        return int(math.trunc(seconds / 86400))
