"""
Deposit conventions and the deposit rate helper.
"""

from dataclasses import dataclass, field
from typing import Union

from ficcurve.context import EvaluationContext
from ficcurve.conventions.calendars import Calendar, get_calendar
from ficcurve.conventions.daycount import (
    ACT_360,
    DayCountConvention,
    get_day_count_convention,
)
from ficcurve.conventions.types import BusinessDayAdjustment
from ficcurve.schema.quotes import Quote

from .base import RelativeDateRateHelper


@dataclass
class DepositConvention:
    """Specification for a deposit/cash instrument convention."""

    day_count: DayCountConvention = ACT_360
    settlement_lag_days: int = 2
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING
    calendar: Union[str, Calendar] = "TARGET"
    end_of_month: bool = False
    _calendar_obj: Calendar = field(init=False, repr=False)

    def __post_init__(self):
        self.day_count = get_day_count_convention(self.day_count)
        self._calendar_obj = get_calendar(self.calendar)

    @property
    def calendar_obj(self) -> Calendar:
        """Get the actual calendar object."""
        return self._calendar_obj


EURIBOR_DEPOSIT = DepositConvention()
ESTR_DEPOSIT = DepositConvention(settlement_lag_days=1)


class DepositRateHelper(RelativeDateRateHelper):
    """Money-market deposit quoted as a simple rate.

    The implied quote is the simple forward rate between the settlement date
    and the maturity: ``(P(start) / P(end) - 1) / tau``.
    """

    def __init__(
        self,
        rate: Union[float, Quote],
        tenor: str,
        context: EvaluationContext,
        convention: DepositConvention = EURIBOR_DEPOSIT,
    ):
        super().__init__(rate, context)
        self.tenor = tenor.upper().strip()
        self.convention = convention
        self.initialize_dates()

    def initialize_dates(self) -> None:
        calendar = self.convention.calendar_obj
        start = calendar.add_business_days(
            self._evaluation_date, self.convention.settlement_lag_days
        )
        maturity = calendar.advance(
            start,
            self.tenor,
            self.convention.business_day_adjustment,
            self.convention.end_of_month,
        )
        self._earliest_date = start
        self._maturity_date = maturity
        self._latest_relevant_date = maturity
        self._pillar_date = maturity
        self.year_fraction = self.convention.day_count.year_fraction(start, maturity)

    def implied_quote(self) -> float:
        curve = self.term_structure
        d_start = curve.discount(self._earliest_date, True)
        d_end = curve.discount(self._maturity_date, True)
        return (d_start / d_end - 1.0) / self.year_fraction
