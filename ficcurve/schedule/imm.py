"""
IMM dates: third Wednesday of March, June, September and December.
"""

from datetime import date, datetime
from typing import Union

from dateutil.relativedelta import WE, relativedelta

IMM_MONTHS = (3, 6, 9, 12)


def third_wednesday(year: int, month: int) -> date:
    return date(year, month, 1) + relativedelta(weekday=WE(3))


def is_imm_date(dt: Union[date, datetime]) -> bool:
    if isinstance(dt, datetime):
        dt = dt.date()
    return dt.month in IMM_MONTHS and dt == third_wednesday(dt.year, dt.month)


def next_imm_date(dt: Union[date, datetime], include_today: bool = False) -> date:
    """First IMM date after ``dt`` (or on it, when ``include_today``)."""
    if isinstance(dt, datetime):
        dt = dt.date()
    anchor = date(dt.year, dt.month, 1)
    while True:
        if anchor.month in IMM_MONTHS:
            candidate = third_wednesday(anchor.year, anchor.month)
            if candidate > dt or (include_today and candidate == dt):
                return candidate
        anchor += relativedelta(months=1)
