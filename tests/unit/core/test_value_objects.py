"""
Unit tests for core value objects.
"""
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import CodeUnspecifiedError, DomainValidationError
from core.domain.value_objects import CorporationCode, EntitlementPeriod

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestCorporationCode:
    """Tests for CorporationCode value object."""

    def test_valid_code(self):
        """Test valid code creation."""
        code = CorporationCode("ACME")
        assert str(code) == "ACME"

    def test_code_is_trimmed(self):
        """Test surrounding whitespace is dropped."""
        assert CorporationCode("  ACME ").value == "ACME"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_code(self, value):
        """Test missing or blank code."""
        with pytest.raises(CodeUnspecifiedError):
            CorporationCode(value)

    def test_blank_code_is_validation_error(self):
        """Test the error kind of a blank code."""
        with pytest.raises(DomainValidationError):
            CorporationCode("")

    def test_equality(self):
        """Test codes compare by value."""
        assert CorporationCode("ACME") == CorporationCode("ACME")
        assert CorporationCode("ACME") != CorporationCode("OTHER")


class TestEntitlementPeriod:
    """Tests for EntitlementPeriod value object."""

    def test_starting(self):
        """Test building a period of whole days."""
        period = EntitlementPeriod.starting(NOW, 30, is_demo=True)
        assert period.begin_date == NOW
        assert period.end_date == NOW + timedelta(days=30)
        assert period.duration == timedelta(days=30)
        assert period.is_demo is True

    def test_end_before_begin(self):
        """Test a period must end after it begins."""
        with pytest.raises(ValueError, match="must end after"):
            EntitlementPeriod(begin_date=NOW, end_date=NOW)

    def test_missing_dates(self):
        """Test a period requires both dates."""
        with pytest.raises(ValueError, match="requires both dates"):
            EntitlementPeriod(begin_date=NOW, end_date=None)

    def test_expiry_is_exclusive(self):
        """Test the window closes exactly at end_date."""
        period = EntitlementPeriod.starting(NOW, 30)
        assert period.is_expired(period.end_date - timedelta(seconds=1)) is False
        assert period.is_expired(period.end_date) is True

    def test_remaining_days_fresh(self):
        """Test remaining days of a fresh period."""
        assert EntitlementPeriod.starting(NOW, 365).remaining_days(NOW) == 365

    def test_remaining_days_truncates(self):
        """Test partial days are truncated toward zero."""
        period = EntitlementPeriod.starting(NOW, 30)
        assert period.remaining_days(NOW + timedelta(hours=1)) == 29
        assert period.remaining_days(period.end_date + timedelta(hours=3)) == 0
        assert period.remaining_days(period.end_date + timedelta(days=2, hours=12)) == -2

    def test_equality(self):
        """Test periods compare by value."""
        first = EntitlementPeriod.starting(NOW, 30, is_demo=True)
        second = EntitlementPeriod.starting(NOW, 30, is_demo=True)
        assert first == second
        assert first != EntitlementPeriod.starting(NOW, 30, is_demo=False)
