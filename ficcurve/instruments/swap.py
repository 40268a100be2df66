"""
Swap leg conventions and the par swap rate helper.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

from ficcurve.context import EvaluationContext
from ficcurve.conventions.calendars import Calendar, get_calendar
from ficcurve.conventions.daycount import (
    ACT_360,
    THIRTY_360E,
    DayCountConvention,
    get_day_count_convention,
)
from ficcurve.conventions.types import BusinessDayAdjustment, Frequency, PillarChoice
from ficcurve.patterns import RelinkableHandle
from ficcurve.schedule import generate_schedule
from ficcurve.schema.quotes import Quote, as_quote

from .base import RelativeDateRateHelper, resolve_pillar


@dataclass
class SwapLegConvention:
    """Specification for a swap leg convention."""

    day_count: DayCountConvention
    pay_frequency: Frequency
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


# Predefined leg specs
EUR_FIXED_ANNUAL = SwapLegConvention(day_count=THIRTY_360E, pay_frequency=Frequency.ANNUAL)
EURIBOR_3M_FLOATING = SwapLegConvention(day_count=ACT_360, pay_frequency=Frequency.QUARTERLY)
EURIBOR_6M_FLOATING = SwapLegConvention(day_count=ACT_360, pay_frequency=Frequency.SEMIANNUAL)


@dataclass(frozen=True)
class AccrualPeriod:
    """Single accrual period of a swap leg."""

    accrual_start: date
    accrual_end: date
    year_fraction: float


def accrual_periods(dates: List[date], day_count: DayCountConvention) -> List[AccrualPeriod]:
    return [
        AccrualPeriod(start, end, day_count.year_fraction(start, end))
        for start, end in zip(dates[:-1], dates[1:])
    ]


class SwapRateHelper(RelativeDateRateHelper):
    """Fixed-vs-floating swap quoted as its par fixed rate.

    Floating coupons are projected off the curve being built over their own
    accrual periods. Discounting uses the exogenous ``discount_curve`` when
    one is given (dual-curve stripping of a projection curve), otherwise the
    curve being built.
    """

    def __init__(
        self,
        rate: Union[float, Quote],
        tenor: str,
        context: EvaluationContext,
        fixed_leg: SwapLegConvention = EUR_FIXED_ANNUAL,
        floating_leg: SwapLegConvention = EURIBOR_6M_FLOATING,
        settlement_days: int = 2,
        spread: Union[float, Quote] = 0.0,
        forward_start: str = "0D",
        discount_curve=None,
        pillar_choice: PillarChoice = PillarChoice.LAST_RELEVANT_DATE,
        custom_pillar_date: Optional[date] = None,
    ):
        super().__init__(rate, context)
        self.tenor = tenor.upper().strip()
        self.fixed_leg = fixed_leg
        self.floating_leg = floating_leg
        self.settlement_days = settlement_days
        self.forward_start = forward_start
        self.pillar_choice = pillar_choice
        self.custom_pillar_date = custom_pillar_date

        self._spread = as_quote(spread)
        self.watch(self._spread)
        # the discount curve is observed: a move there invalidates this helper
        self._discount_handle = RelinkableHandle(discount_curve)
        self.watch(self._discount_handle)

        self.fixed_periods: List[AccrualPeriod] = []
        self.floating_periods: List[AccrualPeriod] = []
        self.initialize_dates()

    @property
    def spread(self) -> float:
        return self._spread.value()

    @property
    def discount_curve(self):
        return None if self._discount_handle.empty else self._discount_handle.current_link

    def initialize_dates(self) -> None:
        calendar = self.floating_leg.calendar_obj
        adjustment = self.floating_leg.business_day_adjustment

        spot = calendar.add_business_days(self._evaluation_date, self.settlement_days)
        start = calendar.advance(spot, self.forward_start, adjustment)
        end = calendar.advance(
            start,
            self.tenor,
            BusinessDayAdjustment.NO_ADJUSTMENT,
            self.fixed_leg.end_of_month,
        )

        fixed_dates = generate_schedule(
            start,
            end,
            self.fixed_leg.pay_frequency,
            self.fixed_leg.calendar_obj,
            self.fixed_leg.business_day_adjustment,
            self.fixed_leg.end_of_month,
        )
        floating_dates = generate_schedule(
            start,
            end,
            self.floating_leg.pay_frequency,
            calendar,
            adjustment,
            self.floating_leg.end_of_month,
        )
        self.fixed_periods = accrual_periods(fixed_dates, self.fixed_leg.day_count)
        self.floating_periods = accrual_periods(floating_dates, self.floating_leg.day_count)

        self._earliest_date = fixed_dates[0]
        self._maturity_date = fixed_dates[-1]
        self._latest_relevant_date = max(fixed_dates[-1], floating_dates[-1])
        self._pillar_date = resolve_pillar(
            self.pillar_choice,
            self._earliest_date,
            self._maturity_date,
            self._latest_relevant_date,
            self.custom_pillar_date,
        )

    def fixed_leg_bps(self) -> float:
        """Annuity of the fixed leg (PV of a unit coupon)."""
        discount = self._discounting_curve()
        return sum(
            p.year_fraction * discount.discount(p.accrual_end, True)
            for p in self.fixed_periods
        )

    def floating_leg_pv(self) -> float:
        """PV of the floating leg including the spread."""
        forecast = self.term_structure
        discount = self._discounting_curve()
        spread = self._spread.value()
        pv = 0.0
        for period in self.floating_periods:
            growth = forecast.discount(period.accrual_start, True) / forecast.discount(
                period.accrual_end, True
            )
            coupon = (growth - 1.0) + spread * period.year_fraction
            pv += coupon * discount.discount(period.accrual_end, True)
        return pv

    def implied_quote(self) -> float:
        return self.floating_leg_pv() / self.fixed_leg_bps()

    def _discounting_curve(self):
        if self._discount_handle.empty:
            return self.term_structure
        return self._discount_handle.current_link

