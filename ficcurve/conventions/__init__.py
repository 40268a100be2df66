"""Day count, calendar and enum conventions."""

from .calendars import (
    NULL_CALENDAR,
    TARGET,
    WEEKEND_ONLY,
    Calendar,
    get_calendar,
    parse_tenor,
)
from .daycount import (
    ACT_360,
    ACT_365F,
    ACT_ACT,
    THIRTY_360E,
    THIRTY_360U,
    DayCountConvention,
    get_day_count_convention,
)
from .types import BusinessDayAdjustment, Frequency, PillarChoice

__all__ = [
    "Calendar",
    "get_calendar",
    "parse_tenor",
    "TARGET",
    "WEEKEND_ONLY",
    "NULL_CALENDAR",
    "DayCountConvention",
    "get_day_count_convention",
    "ACT_360",
    "ACT_365F",
    "ACT_ACT",
    "THIRTY_360E",
    "THIRTY_360U",
    "BusinessDayAdjustment",
    "Frequency",
    "PillarChoice",
]
