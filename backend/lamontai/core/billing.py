"""Billing Periods — pure date arithmetic for subscription terms.

Invariants:
    - A monthly term ends on the same day of the next month, clamped to that
      month's last day (Jan 31 → Feb 28/29)
    - A yearly term ends on the same date next year (Feb 29 → Feb 28)
    - A subscription is current iff it is ACTIVE and its end has not passed
"""

import calendar
from datetime import datetime, timezone

from lamontai.core.domain_types import BillingCycle, SubscriptionStatus


def _add_months(start: datetime, months: int) -> datetime:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def period_end(start: datetime, cycle: BillingCycle) -> datetime:
    """End of one billing term beginning at start."""
    if cycle is BillingCycle.YEARLY:
        return _add_months(start, 12)
    return _add_months(start, 1)


def is_current(status: str, end_date: datetime, now: datetime) -> bool:
    if end_date.tzinfo is None:
        # naive values come back from SQLite; they were written as UTC
        end_date = end_date.replace(tzinfo=timezone.utc)
    return status == SubscriptionStatus.ACTIVE.value and end_date >= now
