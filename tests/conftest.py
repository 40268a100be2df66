from __future__ import annotations

from datetime import date
from typing import Callable, Dict, Optional

import pytest

from ficcurve import EvaluationContext, PiecewiseYieldCurve, SimpleQuote
from ficcurve.conventions import ACT_360, THIRTY_360E, Frequency
from ficcurve.instruments import (
    EUR_FIXED_ANNUAL,
    EURIBOR_6M_FLOATING,
    EURIBOR_DEPOSIT,
    DepositConvention,
    DepositRateHelper,
    RateHelper,
    SwapLegConvention,
    SwapRateHelper,
)

CURVE_DATE = date(2024, 1, 2)

# EURIBOR 6M market, decimal rates
DEPOSIT_QUOTES = {"1M": 0.0386, "3M": 0.0391, "6M": 0.0386}
SWAP_QUOTES = {"2Y": 0.0312, "3Y": 0.0287, "5Y": 0.0268, "10Y": 0.0262}


class ScriptedHelper(RateHelper):
    """Helper whose implied quote is an arbitrary function of one discount factor.

    The discount is read at ``read_date``, by default the pillar.
    """

    def __init__(
        self,
        quote,
        pillar: date,
        implied: Callable[[float], float],
        read_date: Optional[date] = None,
    ):
        super().__init__(quote)
        self._implied = implied
        self._read_date = read_date or pillar
        self.calls = 0
        self._earliest_date = pillar
        self._maturity_date = pillar
        self._latest_relevant_date = pillar
        self._pillar_date = pillar

    def implied_quote(self) -> float:
        self.calls += 1
        return self._implied(self.term_structure.discount(self._read_date, True))


@pytest.fixture
def curve_date() -> date:
    return CURVE_DATE


@pytest.fixture
def context() -> EvaluationContext:
    return EvaluationContext(CURVE_DATE)


@pytest.fixture
def null_deposit() -> DepositConvention:
    # no settlement lag, no holidays: deposit start == as-of date
    return DepositConvention(day_count=ACT_360, settlement_lag_days=0, calendar="NULL")


@pytest.fixture
def null_fixed_leg() -> SwapLegConvention:
    return SwapLegConvention(
        day_count=THIRTY_360E, pay_frequency=Frequency.ANNUAL, calendar="NULL"
    )


@pytest.fixture
def null_floating_leg() -> SwapLegConvention:
    return SwapLegConvention(
        day_count=ACT_360, pay_frequency=Frequency.QUARTERLY, calendar="NULL"
    )


@pytest.fixture
def market_quotes() -> Dict[str, SimpleQuote]:
    quotes = {tenor: SimpleQuote(rate) for tenor, rate in DEPOSIT_QUOTES.items()}
    quotes.update({tenor: SimpleQuote(rate) for tenor, rate in SWAP_QUOTES.items()})
    return quotes


@pytest.fixture
def eur_helpers(context, market_quotes):
    helpers = [
        DepositRateHelper(market_quotes[tenor], tenor, context, EURIBOR_DEPOSIT)
        for tenor in DEPOSIT_QUOTES
    ]
    helpers += [
        SwapRateHelper(
            market_quotes[tenor],
            tenor,
            context,
            fixed_leg=EUR_FIXED_ANNUAL,
            floating_leg=EURIBOR_6M_FLOATING,
        )
        for tenor in SWAP_QUOTES
    ]
    return helpers


@pytest.fixture
def eur_curve(context, eur_helpers) -> PiecewiseYieldCurve:
    return PiecewiseYieldCurve(
        eur_helpers, context=context, settlement_days=2, calendar="TARGET"
    )


@pytest.fixture
def scripted_helper():
    return ScriptedHelper
