"""Create rate helpers from generic market quotes."""

import re

from ficcurve.context import EvaluationContext
from ficcurve.schedule.imm import next_imm_date
from ficcurve.schema.quotes import MarketQuote

from .base import RateHelper
from .basis_swap import BasisSwapConvention, BasisSwapRateHelper
from .deposit import DepositConvention, DepositRateHelper
from .fra import FraRateHelper
from .futures import FuturesConvention, FuturesRateHelper
from .swap import SwapLegConvention, SwapRateHelper

_FRA_TENOR = re.compile(r"^(\d+)X(\d+)$")
_IMM_TENOR = re.compile(r"^IMM(\d+)$")


def create_helper_from_quote(
    context: EvaluationContext,
    quote: MarketQuote,
    discount_curve=None,
    projection_curve=None,
) -> RateHelper:
    """Create a rate helper from a generic quote.

    The helper type follows the quote's convention object:

    - ``DepositConvention`` with tenor ``"3M"`` -> deposit, ``"3X6"`` -> FRA
    - ``SwapLegConvention`` (floating leg) -> par swap
    - ``FuturesConvention`` with tenor ``"IMM1"``, ``"IMM2"``... -> futures on
      the n-th IMM date after the as-of date; the quote's rate is the price
    - ``BasisSwapConvention`` -> basis swap; the quote's rate is the basis in
      basis points and ``projection_curve`` and ``discount_curve`` are required

    ``discount_curve`` is also passed to par swaps for dual-curve stripping.
    """
    tenor = quote.tenor.upper().strip()

    if isinstance(quote.instrument, DepositConvention):
        fra = _FRA_TENOR.match(tenor)
        if fra:
            return FraRateHelper(
                quote.decimal_rate,
                int(fra.group(1)),
                int(fra.group(2)),
                context,
                convention=quote.instrument,
            )
        return DepositRateHelper(quote.decimal_rate, tenor, context, quote.instrument)

    if isinstance(quote.instrument, SwapLegConvention):
        return SwapRateHelper(
            quote.decimal_rate,
            tenor,
            context,
            floating_leg=quote.instrument,
            discount_curve=discount_curve,
        )

    if isinstance(quote.instrument, BasisSwapConvention):
        return BasisSwapRateHelper(
            quote.rate * 1e-4,
            tenor,
            context,
            projection_curve,
            discount_curve,
            convention=quote.instrument,
        )

    if isinstance(quote.instrument, FuturesConvention):
        imm = _IMM_TENOR.match(tenor)
        if not imm or int(imm.group(1)) < 1:
            raise ValueError(f"Unsupported futures tenor: {quote.tenor}")
        start = context.as_of
        for _ in range(int(imm.group(1))):
            start = next_imm_date(start)
        convention = quote.instrument
        return FuturesRateHelper(
            quote.rate,
            start,
            length_in_months=convention.length_in_months,
            calendar=convention.calendar,
            adjustment=convention.business_day_adjustment,
            end_of_month=convention.end_of_month,
            day_count=convention.day_count,
        )

    raise TypeError(f"Unsupported instrument type: {type(quote.instrument).__name__}")
