"""
Floating-vs-floating basis swap helper.
"""

from dataclasses import dataclass, field
from typing import List, Union

from ficcurve.context import EvaluationContext
from ficcurve.conventions.types import BusinessDayAdjustment
from ficcurve.errors import CurveConfigurationError
from ficcurve.patterns import RelinkableHandle
from ficcurve.schedule import generate_schedule
from ficcurve.schema.quotes import Quote

from .base import RelativeDateRateHelper
from .swap import (
    EURIBOR_3M_FLOATING,
    EURIBOR_6M_FLOATING,
    AccrualPeriod,
    SwapLegConvention,
    accrual_periods,
)


@dataclass
class BasisSwapConvention:
    """Specification for a basis swap: ``base_leg`` + basis vs. ``other_leg``."""

    base_leg: SwapLegConvention = field(default_factory=lambda: EURIBOR_3M_FLOATING)
    other_leg: SwapLegConvention = field(default_factory=lambda: EURIBOR_6M_FLOATING)
    settlement_days: int = 2
    bootstrap_base_curve: bool = False


EURIBOR_3M_6M_BASIS = BasisSwapConvention()


class BasisSwapRateHelper(RelativeDateRateHelper):
    """Basis swap paying ``base_leg`` + basis and receiving ``other_leg``.

    One leg is projected off the curve being built, the other off the fixed
    ``projection_curve``: with ``bootstrap_base_curve`` the base leg is the
    one being built, otherwise the other leg is. Both legs are discounted on
    the exogenous ``discount_curve``. The quote is the basis, as a decimal
    spread on the base leg, that sets the swap value to zero.
    """

    def __init__(
        self,
        basis: Union[float, Quote],
        tenor: str,
        context: EvaluationContext,
        projection_curve,
        discount_curve,
        convention: BasisSwapConvention = EURIBOR_3M_6M_BASIS,
    ):
        if projection_curve is None or discount_curve is None:
            raise CurveConfigurationError(
                "basis swap helper needs a projection curve and a discount curve"
            )
        super().__init__(basis, context)
        self.tenor = tenor.upper().strip()
        self.convention = convention

        self._projection_handle = RelinkableHandle(projection_curve)
        self._discount_handle = RelinkableHandle(discount_curve)
        self.watch(self._projection_handle)
        self.watch(self._discount_handle)

        self.base_periods: List[AccrualPeriod] = []
        self.other_periods: List[AccrualPeriod] = []
        self.initialize_dates()

    @property
    def projection_curve(self):
        return self._projection_handle.current_link

    @property
    def discount_curve(self):
        return self._discount_handle.current_link

    def initialize_dates(self) -> None:
        base_leg = self.convention.base_leg
        other_leg = self.convention.other_leg
        calendar = base_leg.calendar_obj

        start = calendar.add_business_days(
            self._evaluation_date, self.convention.settlement_days
        )
        end = calendar.advance(
            start, self.tenor, BusinessDayAdjustment.NO_ADJUSTMENT, base_leg.end_of_month
        )

        base_dates = generate_schedule(
            start,
            end,
            base_leg.pay_frequency,
            calendar,
            base_leg.business_day_adjustment,
            base_leg.end_of_month,
        )
        other_dates = generate_schedule(
            start,
            end,
            other_leg.pay_frequency,
            other_leg.calendar_obj,
            other_leg.business_day_adjustment,
            other_leg.end_of_month,
        )
        self.base_periods = accrual_periods(base_dates, base_leg.day_count)
        self.other_periods = accrual_periods(other_dates, other_leg.day_count)

        self._earliest_date = start
        self._maturity_date = base_dates[-1]
        self._latest_relevant_date = max(base_dates[-1], other_dates[-1])
        self._pillar_date = self._latest_relevant_date

    def _forecast_curves(self):
        if self.convention.bootstrap_base_curve:
            return self.term_structure, self.projection_curve
        return self.projection_curve, self.term_structure

    def _leg_pv(self, periods: List[AccrualPeriod], forecast) -> float:
        discount = self.discount_curve
        pv = 0.0
        for period in periods:
            growth = forecast.discount(period.accrual_start, True) / forecast.discount(
                period.accrual_end, True
            )
            pv += (growth - 1.0) * discount.discount(period.accrual_end, True)
        return pv

    def base_leg_bps(self) -> float:
        """Annuity of the base leg (PV of a unit spread)."""
        discount = self.discount_curve
        return sum(
            p.year_fraction * discount.discount(p.accrual_end, True)
            for p in self.base_periods
        )

    def implied_quote(self) -> float:
        base_forecast, other_forecast = self._forecast_curves()
        base_pv = self._leg_pv(self.base_periods, base_forecast)
        other_pv = self._leg_pv(self.other_periods, other_forecast)
        return (other_pv - base_pv) / self.base_leg_bps()
