"""
Piecewise yield curve bootstrapped from rate helpers.
"""

import logging
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple, Type, Union

import numpy as np
import pandas as pd

from ficcurve.context import EvaluationContext
from ficcurve.conventions.calendars import Calendar, get_calendar
from ficcurve.conventions.daycount import DayCountConvention
from ficcurve.errors import CurveConfigurationError, CurveError
from ficcurve.instruments.base import RateHelper
from ficcurve.interpolation.base import Interpolator
from ficcurve.interpolation.factory import interpolator_class
from ficcurve.patterns import LazyObject
from ficcurve.schema.quotes import Quote, as_quote

from .base import YieldTermStructure
from .bootstrap import BootstrapConfig, BootstrapReport, IterativeBootstrap
from .traits import (
    BootstrapTraits,
    CurveRepresentation,
    DiscountTraits,
    ForwardRateTraits,
    ZeroYieldTraits,
    make_traits,
)

logger = logging.getLogger(__name__)

_DEFAULT_INTERPOLATION = {
    DiscountTraits: "LOG_LINEAR",
    ZeroYieldTraits: "LINEAR",
    ForwardRateTraits: "BACKWARD_FLAT",
}


class PiecewiseYieldCurve(LazyObject, YieldTermStructure):
    """Yield curve whose nodes are solved so that every helper reprices.

    The curve is lazy: it subscribes to its helpers (and through them to
    their quotes and the evaluation context) and bootstraps again on the
    first read after any of them changes.

    The reference date is either fixed, or moves with an
    :class:`~ficcurve.context.EvaluationContext` as
    ``as_of + settlement_days`` business days on ``calendar``.

    Example:
        >>> ctx = EvaluationContext(date(2024, 1, 2))
        >>> helpers = [DepositRateHelper(0.035, "6M", ctx), ...]
        >>> curve = PiecewiseYieldCurve(helpers, context=ctx, settlement_days=2,
        ...                             calendar="TARGET")
        >>> curve.discount(date(2026, 1, 5))
    """

    def __init__(
        self,
        instruments: Sequence[RateHelper],
        reference_date: Optional[Union[date, datetime]] = None,
        *,
        context: Optional[EvaluationContext] = None,
        settlement_days: int = 0,
        calendar: Union[str, Calendar] = "NULL",
        day_counter: Union[str, DayCountConvention] = "ACT/365F",
        representation: Union[str, CurveRepresentation, BootstrapTraits] = (
            CurveRepresentation.DISCOUNT
        ),
        interpolation: Optional[Union[str, Type[Interpolator]]] = None,
        config: Optional[BootstrapConfig] = None,
        jumps: Optional[Sequence[Union[float, Quote]]] = None,
        jump_dates: Optional[Sequence[date]] = None,
        name: str = "",
    ):
        """
        Initialize the curve; nothing is solved until the first read.

        Args:
            instruments: Rate helpers, one per node; sorted here by pillar date
            reference_date: Fixed reference date
            context: Evaluation context for a moving reference date
            settlement_days: Business days from as-of date to reference date
            calendar: Calendar for the settlement lag
            day_counter: Day count converting dates to curve times
            representation: What the nodes hold (discount, zero yield, forward)
            interpolation: Interpolation method name or Interpolator subclass;
                defaults to the usual pairing for the representation
            config: Bootstrap configuration
            jumps: Discount-factor jumps (turn-of-year effects)
            jump_dates: Dates of the jumps; defaults to Dec 31 of each year
                from the reference year on
            name: Optional curve name
        """
        LazyObject.__init__(self)
        YieldTermStructure.__init__(self, day_counter, name)

        if reference_date is None and context is None:
            raise CurveConfigurationError("either reference_date or context is required")
        if reference_date is not None and context is not None:
            raise CurveConfigurationError("reference_date and context are exclusive")
        if settlement_days < 0:
            raise CurveConfigurationError(
                f"settlement_days must be non-negative, got {settlement_days}"
            )

        if isinstance(reference_date, datetime):
            reference_date = reference_date.date()
        self._fixed_reference = reference_date
        self._context = context
        self._settlement_days = settlement_days
        self._calendar = get_calendar(calendar)

        self.config = config or BootstrapConfig()
        self._traits = make_traits(representation, self.config.allow_negative_rates)
        if interpolation is None:
            interpolation = _DEFAULT_INTERPOLATION.get(type(self._traits), "LINEAR")
        self._interpolator_class = interpolator_class(interpolation)

        self._instruments: Tuple[RateHelper, ...] = tuple(
            sorted(instruments, key=lambda h: h.pillar_date)
        )

        self._jumps: List[Quote] = [as_quote(j) for j in (jumps or [])]
        if jump_dates is not None and len(jump_dates) != len(self._jumps):
            raise CurveConfigurationError(
                f"mismatch between number of jumps ({len(self._jumps)}) "
                f"and jump dates ({len(jump_dates)})"
            )
        self._explicit_jump_dates = list(jump_dates) if jump_dates is not None else None
        self._jump_times: List[float] = []
        for jump in self._jumps:
            self.watch(jump)

        if context is not None:
            self.watch(context)

        self._dates: List[date] = []
        self._times = np.array([])
        self._data = np.array([])
        self._interpolation: Optional[Interpolator] = None
        self._report: Optional[BootstrapReport] = None

        self._bootstrap = IterativeBootstrap(self.config)
        self._bootstrap.setup(self)

    # ------------------------------------------------------------------
    # Term structure metadata
    # ------------------------------------------------------------------
    @property
    def reference_date(self) -> date:
        if self._fixed_reference is not None:
            return self._fixed_reference
        return self._calendar.add_business_days(self._context.as_of, self._settlement_days)

    @property
    def max_date(self) -> date:
        self.calculate()
        return max([self._dates[-1]] + [h.latest_date for h in self._instruments])

    @property
    def context(self) -> Optional[EvaluationContext]:
        return self._context

    @property
    def instruments(self) -> Tuple[RateHelper, ...]:
        return self._instruments

    @property
    def traits(self) -> BootstrapTraits:
        return self._traits

    @property
    def interpolator_class(self) -> Type[Interpolator]:
        return self._interpolator_class

    @property
    def bootstrap(self) -> IterativeBootstrap:
        return self._bootstrap

    # ------------------------------------------------------------------
    # Calculated state
    # ------------------------------------------------------------------
    @property
    def interpolation(self) -> Interpolator:
        self.calculate()
        return self._interpolation

    @property
    def report(self) -> BootstrapReport:
        """Diagnostics of the bootstrap that produced the current nodes."""
        self.calculate()
        return self._report

    def dates(self) -> List[date]:
        self.calculate()
        return list(self._dates)

    def times(self) -> np.ndarray:
        self.calculate()
        return self._times.copy()

    def data(self) -> np.ndarray:
        self.calculate()
        return self._data.copy()

    def nodes(self) -> List[Tuple[date, float]]:
        """(date, value) pairs, reference node first."""
        self.calculate()
        return list(zip(self._dates, (float(v) for v in self._data)))

    def nodes_frame(self) -> pd.DataFrame:
        """Node snapshot with discount factors and zero rates."""
        self.calculate()
        discounts = [self._discount_impl(t) for t in self._times]
        zeros = [
            self._traits.zero_yield_impl(self._interpolation, t) for t in self._times
        ]
        return pd.DataFrame(
            {
                "date": self._dates,
                "time": self._times,
                "value": self._data,
                "discount": discounts,
                "zero_rate": zeros,
            }
        )

    def _discount_impl(self, t: float) -> float:
        self.calculate()
        df = self._traits.discount_impl(self._interpolation, t)
        for jump, jump_time in zip(self._jumps, self._jump_times):
            if 0.0 < jump_time < t:
                df *= jump.value()
        return df

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------
    def calculate(self) -> None:
        super().calculate()
        if self.is_frozen and self._interpolation is None:
            raise CurveError(
                "curve was frozen before its first calculation; unfreeze it to bootstrap"
            )

    def perform_calculations(self) -> None:
        self._set_jumps()
        logger.debug(
            "Bootstrapping %s with %s instruments (reference %s)",
            self,
            len(self._instruments),
            self.reference_date,
        )
        self._report = self._bootstrap.calculate()

    def _set_jumps(self) -> None:
        if not self._jumps:
            self._jump_times = []
            return
        reference = self.reference_date
        if self._explicit_jump_dates is None:
            jump_dates = [date(reference.year + i, 12, 31) for i in range(len(self._jumps))]
        else:
            jump_dates = self._explicit_jump_dates
        for jump, jump_date in zip(self._jumps, jump_dates):
            if not jump.is_valid() or not jump.value() > 0.0:
                raise CurveConfigurationError(
                    f"invalid jump at {jump_date}: jump values must be positive"
                )
        self._jump_times = [self.time_from_reference(d) for d in jump_dates]

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return (
            f"PiecewiseYieldCurve{label}(instruments={len(self._instruments)}, "
            f"traits={type(self._traits).__name__}, "
            f"interpolation={self._interpolator_class.__name__})"
        )
