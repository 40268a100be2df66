"""
Payment schedule generation for swap legs.
"""

from datetime import date, datetime, timedelta
from typing import List, Union

from dateutil.relativedelta import relativedelta

from ficcurve.conventions.calendars import Calendar
from ficcurve.conventions.types import BusinessDayAdjustment, Frequency

DateLike = Union[date, datetime]


def _to_date(dt: DateLike) -> date:
    return dt.date() if isinstance(dt, datetime) else dt


def is_end_of_month(dt: DateLike) -> bool:
    """Check if date is end of month."""
    dt = _to_date(dt)
    return (dt + timedelta(days=1)).month != dt.month


def add_months(dt: DateLike, months: int, end_of_month: bool = False) -> date:
    """Add months to a date, pinning month-end starts to month-end if requested."""
    dt = _to_date(dt)
    shifted = dt + relativedelta(months=months)
    if end_of_month and is_end_of_month(dt):
        return shifted + relativedelta(day=31)
    return shifted


def generate_schedule(
    start: DateLike,
    end: DateLike,
    frequency: Frequency,
    calendar: Calendar,
    adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
    end_of_month: bool = False,
) -> List[date]:
    """
    Generate adjusted schedule dates from start to end.

    Dates roll forward from the unadjusted start; a short final stub absorbs
    any remainder, and a final period shorter than a week is merged into the
    previous one.

    Args:
        start: Effective date (unadjusted)
        end: Termination date (unadjusted)
        frequency: Period length
        calendar: Calendar used to adjust every date
        adjustment: Business day adjustment rule
        end_of_month: Keep month-end starts on month-end

    Returns:
        Adjusted dates, including start and end
    """
    start = _to_date(start)
    end = _to_date(end)
    if start >= end:
        raise ValueError("Effective date must be before maturity date")

    unadjusted = [start]
    n = 1
    while True:
        next_date = add_months(start, n * frequency.months(), end_of_month)
        if next_date >= end - timedelta(days=7):
            break
        unadjusted.append(next_date)
        n += 1
    unadjusted.append(end)

    dates: List[date] = []
    for dt in unadjusted:
        adjusted = calendar.adjust(dt, adjustment)
        if dates and adjusted <= dates[-1]:
            continue
        dates.append(adjusted)
    return dates
