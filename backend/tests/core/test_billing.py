"""Billing Periods — month/year term arithmetic and the current-subscription check."""

from datetime import datetime, timedelta, timezone

import pytest

from lamontai.core.billing import is_current, period_end
from lamontai.core.domain_types import BillingCycle

UTC = timezone.utc


@pytest.mark.parametrize("start,expected", [
    (datetime(2026, 3, 15, tzinfo=UTC), datetime(2026, 4, 15, tzinfo=UTC)),
    (datetime(2026, 1, 31, tzinfo=UTC), datetime(2026, 2, 28, tzinfo=UTC)),
    (datetime(2028, 1, 31, tzinfo=UTC), datetime(2028, 2, 29, tzinfo=UTC)),
    (datetime(2026, 12, 10, tzinfo=UTC), datetime(2027, 1, 10, tzinfo=UTC)),
])
def test_monthly_term_clamps_to_month_end(start, expected):
    assert period_end(start, BillingCycle.MONTHLY) == expected


def test_yearly_term_from_leap_day():
    start = datetime(2028, 2, 29, 9, 30, tzinfo=UTC)
    assert period_end(start, BillingCycle.YEARLY) == datetime(2029, 2, 28, 9, 30, tzinfo=UTC)


def test_current_only_while_active_and_unexpired():
    now = datetime(2026, 5, 1, tzinfo=UTC)
    later = now + timedelta(days=1)
    assert is_current("active", later, now)
    assert not is_current("canceled", later, now)
    assert not is_current("active", now - timedelta(seconds=1), now)


def test_naive_end_date_is_read_as_utc():
    now = datetime(2026, 5, 1, tzinfo=UTC)
    assert is_current("active", datetime(2026, 5, 2), now)
