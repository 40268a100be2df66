"""
Forward rate agreement helper.
"""

from datetime import date
from typing import Optional, Union

from ficcurve.context import EvaluationContext
from ficcurve.conventions.types import PillarChoice
from ficcurve.errors import CurveConfigurationError
from ficcurve.schema.quotes import Quote

from .base import RelativeDateRateHelper, resolve_pillar
from .deposit import EURIBOR_DEPOSIT, DepositConvention


class FraRateHelper(RelativeDateRateHelper):
    """FRA quoted as the simple forward rate for ``months_to_start`` x ``months_to_end``."""

    def __init__(
        self,
        rate: Union[float, Quote],
        months_to_start: int,
        months_to_end: int,
        context: EvaluationContext,
        convention: DepositConvention = EURIBOR_DEPOSIT,
        pillar_choice: PillarChoice = PillarChoice.LAST_RELEVANT_DATE,
        custom_pillar_date: Optional[date] = None,
    ):
        if months_to_end <= months_to_start:
            raise CurveConfigurationError(
                f"months_to_end ({months_to_end}) must be greater than "
                f"months_to_start ({months_to_start})"
            )
        super().__init__(rate, context)
        self.months_to_start = months_to_start
        self.months_to_end = months_to_end
        self.convention = convention
        self.pillar_choice = pillar_choice
        self.custom_pillar_date = custom_pillar_date
        self.initialize_dates()

    def initialize_dates(self) -> None:
        calendar = self.convention.calendar_obj
        adjustment = self.convention.business_day_adjustment
        eom = self.convention.end_of_month

        settlement = calendar.add_business_days(
            self._evaluation_date, self.convention.settlement_lag_days
        )
        start = calendar.advance(settlement, f"{self.months_to_start}M", adjustment, eom)
        end = calendar.advance(
            start, f"{self.months_to_end - self.months_to_start}M", adjustment, eom
        )
        self._earliest_date = start
        self._maturity_date = end
        self._latest_relevant_date = end
        self._pillar_date = resolve_pillar(
            self.pillar_choice, start, end, end, self.custom_pillar_date
        )
        self.year_fraction = self.convention.day_count.year_fraction(start, end)

    def implied_quote(self) -> float:
        curve = self.term_structure
        d_start = curve.discount(self._earliest_date, True)
        d_end = curve.discount(self._maturity_date, True)
        return (d_start / d_end - 1.0) / self.year_fraction
