"""
QuantLib-backed calendars and business day arithmetic.
"""

from datetime import date, datetime
from typing import Union

import QuantLib as ql

from .daycount import to_ql_date, to_py_date
from .types import BusinessDayAdjustment

DateLike = Union[date, datetime]

_QL_ADJUSTMENTS = {
    BusinessDayAdjustment.NO_ADJUSTMENT: ql.Unadjusted,
    BusinessDayAdjustment.FOLLOWING: ql.Following,
    BusinessDayAdjustment.MODIFIED_FOLLOWING: ql.ModifiedFollowing,
    BusinessDayAdjustment.PRECEDING: ql.Preceding,
    BusinessDayAdjustment.MODIFIED_PRECEDING: ql.ModifiedPreceding,
}


def map_business_day_adjustment(adjustment: Union[BusinessDayAdjustment, str]) -> int:
    """Map a business day adjustment to the QuantLib convention constant."""
    if isinstance(adjustment, str):
        adjustment = BusinessDayAdjustment[adjustment.upper()]
    return _QL_ADJUSTMENTS[adjustment]


def parse_tenor(tenor: str) -> ql.Period:
    """Parse a tenor string such as '2D', '1W', '3M' or '10Y'."""
    t = tenor.upper().strip()
    if not t or t[-1] not in "DWMY" or not t[:-1].isdigit():
        raise ValueError(f"Unsupported tenor: {tenor}")
    return ql.Period(t)


class Calendar:
    """Business day calendar wrapping a QuantLib calendar."""

    def __init__(self, name: str, ql_calendar: ql.Calendar):
        self.name = name
        self._ql_calendar = ql_calendar

    def is_business_day(self, dt: DateLike) -> bool:
        """Check if date is a business day (not weekend or holiday)."""
        return self._ql_calendar.isBusinessDay(to_ql_date(dt))

    def is_holiday(self, dt: DateLike) -> bool:
        return self._ql_calendar.isHoliday(to_ql_date(dt))

    def adjust(
        self,
        dt: DateLike,
        adjustment: BusinessDayAdjustment = BusinessDayAdjustment.FOLLOWING,
    ) -> date:
        """Roll a date onto a business day."""
        ql_result = self._ql_calendar.adjust(
            to_ql_date(dt), map_business_day_adjustment(adjustment)
        )
        return to_py_date(ql_result)

    def advance(
        self,
        dt: DateLike,
        tenor: Union[str, ql.Period],
        adjustment: BusinessDayAdjustment = BusinessDayAdjustment.FOLLOWING,
        end_of_month: bool = False,
    ) -> date:
        """Move a date forward by a tenor.

        Day tenors count business days; week, month and year tenors move in
        calendar time and are then adjusted.
        """
        period = parse_tenor(tenor) if isinstance(tenor, str) else tenor
        ql_result = self._ql_calendar.advance(
            to_ql_date(dt),
            period,
            map_business_day_adjustment(adjustment),
            end_of_month,
        )
        return to_py_date(ql_result)

    def add_business_days(self, start_date: DateLike, days: int) -> date:
        """Add business days to a date."""
        ql_result = self._ql_calendar.advance(to_ql_date(start_date), days, ql.Days)
        return to_py_date(ql_result)

    def business_days_between(self, start: DateLike, end: DateLike) -> int:
        """Count business days in (start, end]."""
        ql_start = to_ql_date(start)
        ql_end = to_ql_date(end)
        if ql_start >= ql_end:
            return 0
        return self._ql_calendar.businessDaysBetween(ql_start, ql_end, False, True)

    def __eq__(self, other) -> bool:
        return isinstance(other, Calendar) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"Calendar({self.name!r})"


# Pre-defined calendar instances
TARGET = Calendar("TARGET", ql.TARGET())
WEEKEND_ONLY = Calendar("WEEKEND", ql.WeekendsOnly())
NULL_CALENDAR = Calendar("NULL", ql.NullCalendar())

# Calendar registry
CALENDARS = {
    "TARGET": TARGET,
    "EUR": TARGET,
    "WEEKEND": WEEKEND_ONLY,
    "NULL": NULL_CALENDAR,
}


def get_calendar(name: Union[str, Calendar]) -> Calendar:
    """Get a calendar by name ("TARGET", "EUR", "WEEKEND" or "NULL")."""
    if isinstance(name, Calendar):
        return name
    key = name.upper().strip()
    if key not in CALENDARS:
        raise ValueError(
            f"Unknown calendar: {name}. Available: {list(CALENDARS.keys())}"
        )
    return CALENDARS[key]
