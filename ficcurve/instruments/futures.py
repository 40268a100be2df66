"""
Interest-rate futures helper.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

from ficcurve.conventions.calendars import Calendar, get_calendar
from ficcurve.conventions.daycount import DayCountConvention, get_day_count_convention
from ficcurve.conventions.types import BusinessDayAdjustment
from ficcurve.errors import CurveConfigurationError
from ficcurve.schedule.imm import is_imm_date
from ficcurve.schema.quotes import Quote, as_quote

from .base import RateHelper


@dataclass
class FuturesConvention:
    """Specification for an IMM futures contract."""

    length_in_months: int = 3
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING
    calendar: Union[str, Calendar] = "TARGET"
    end_of_month: bool = False
    day_count: Union[str, DayCountConvention] = "ACT/360"


EURIBOR_3M_FUTURES = FuturesConvention()


class FuturesRateHelper(RateHelper):
    """Futures quoted as a price ``100 * (1 - (forward + convexity adjustment))``.

    Dates are fixed by the IMM start date, so the helper does not move with
    the evaluation date.
    """

    def __init__(
        self,
        price: Union[float, Quote],
        imm_date: Union[date, datetime],
        length_in_months: int = 3,
        calendar: Union[str, Calendar] = "TARGET",
        adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
        end_of_month: bool = False,
        day_count: Union[str, DayCountConvention] = "ACT/360",
        convexity_adjustment: Union[float, Quote] = 0.0,
    ):
        super().__init__(price)
        if isinstance(imm_date, datetime):
            imm_date = imm_date.date()
        if not is_imm_date(imm_date):
            raise CurveConfigurationError(f"{imm_date} is not a valid IMM date")

        self.calendar = get_calendar(calendar)
        self.day_count = get_day_count_convention(day_count)
        self._convexity_adjustment = as_quote(convexity_adjustment)
        self.watch(self._convexity_adjustment)

        end = self.calendar.advance(
            imm_date, f"{length_in_months}M", adjustment, end_of_month
        )
        self._earliest_date = imm_date
        self._maturity_date = end
        self._latest_relevant_date = end
        self._pillar_date = end
        self.year_fraction = self.day_count.year_fraction(imm_date, end)

    @property
    def convexity_adjustment(self) -> float:
        return self._convexity_adjustment.value()

    def implied_quote(self) -> float:
        curve = self.term_structure
        forward = (
            curve.discount(self._earliest_date, True)
            / curve.discount(self._maturity_date, True)
            - 1.0
        ) / self.year_fraction
        conv_adj = self._convexity_adjustment.value()
        if conv_adj < 0.0:
            raise CurveConfigurationError(
                f"Negative ({conv_adj}) futures convexity adjustment"
            )
        return 100.0 * (1.0 - (forward + conv_adj))
