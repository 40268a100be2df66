"""
Base yield term structure.
"""

import math
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional, Union

from ficcurve.conventions.daycount import (
    DayCountConvention,
    get_day_count_convention,
)
from ficcurve.patterns import Observable, Observer
from ficcurve.schema.quotes import Quote, as_quote

TimeLike = Union[datetime, date, float]

_ZERO_TIME_BUMP = 1e-4
_FORWARD_BUMP = 1e-4


class YieldTermStructure(ABC):
    """Base implementation for yield curves.

    Queries accept either a date or a time (in years from the reference
    date under the curve's day counter). Past ``max_date`` queries fail unless
    extrapolation is enabled on the curve or requested per call.
    """

    def __init__(
        self,
        day_counter: Union[str, DayCountConvention] = "ACT/365F",
        name: str = "",
    ):
        """
        Initialize base curve.

        Args:
            day_counter: Day-count convention converting dates to curve times
            name: Optional curve name for identification
        """
        self.name = name
        self._day_counter = get_day_count_convention(day_counter)
        self._extrapolation = False

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    @property
    @abstractmethod
    def reference_date(self) -> date:
        """Date at which discount factors equal one."""

    @property
    @abstractmethod
    def max_date(self) -> date:
        """Latest date for which the curve can return values."""

    @property
    def day_counter(self) -> DayCountConvention:
        return self._day_counter

    @property
    def max_time(self) -> float:
        return self.time_from_reference(self.max_date)

    def time_from_reference(self, dt: TimeLike) -> float:
        """Convert a date or datetime to the curve's year fraction basis."""
        if isinstance(dt, (int, float)):
            return float(dt)
        if isinstance(dt, datetime):
            dt = dt.date()
        return self._day_counter.year_fraction(self.reference_date, dt)

    # ------------------------------------------------------------------
    # Extrapolation
    # ------------------------------------------------------------------
    def enable_extrapolation(self) -> None:
        self._extrapolation = True

    def disable_extrapolation(self) -> None:
        self._extrapolation = False

    @property
    def allows_extrapolation(self) -> bool:
        return self._extrapolation

    def _check_range(self, t: float, extrapolate: bool) -> None:
        if t < 0.0:
            raise ValueError(f"negative time ({t}) given")
        if extrapolate or self.allows_extrapolation:
            return
        max_time = self.max_time
        if t > max_time and not math.isclose(t, max_time, rel_tol=0.0, abs_tol=1e-12):
            raise ValueError(f"time ({t}) is past max curve time ({max_time})")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def discount(self, t: TimeLike, extrapolate: bool = False) -> float:
        """Discount factor at a date or time."""
        time_frac = self.time_from_reference(t)
        self._check_range(time_frac, extrapolate)
        return self._discount_impl(time_frac)

    def zero_rate(self, t: TimeLike, extrapolate: bool = False) -> float:
        """Continuously compounded zero rate at a date or time."""
        time_frac = self.time_from_reference(t)
        self._check_range(time_frac, extrapolate)
        if time_frac == 0.0:
            time_frac = _ZERO_TIME_BUMP
        df_val = self._discount_impl(time_frac)
        if df_val <= 0:
            raise ValueError(f"Non-positive discount factor: {df_val}")
        return -math.log(df_val) / time_frac

    def forward_rate(self, t1: TimeLike, t2: TimeLike, extrapolate: bool = False) -> float:
        """Continuously compounded forward rate between two dates or times."""
        time1 = self.time_from_reference(t1)
        time2 = self.time_from_reference(t2)
        if time2 < time1:
            raise ValueError(f"forward end ({time2}) before start ({time1})")
        if time2 == time1:
            return self.instantaneous_forward(time1, extrapolate)
        self._check_range(time2, extrapolate)
        self._check_range(time1, extrapolate)
        return math.log(self._discount_impl(time1) / self._discount_impl(time2)) / (
            time2 - time1
        )

    def instantaneous_forward(self, t: TimeLike, extrapolate: bool = False) -> float:
        """Instantaneous forward rate, by finite differences on log discounts."""
        time_frac = self.time_from_reference(t)
        self._check_range(time_frac, extrapolate)
        t1 = max(time_frac - _FORWARD_BUMP / 2.0, 0.0)
        t2 = t1 + _FORWARD_BUMP
        return math.log(self._discount_impl(t1) / self._discount_impl(t2)) / (t2 - t1)

    def simple_forward_rate(
        self,
        start: Union[datetime, date],
        end: Union[datetime, date],
        day_count: Optional[Union[str, DayCountConvention]] = None,
        extrapolate: bool = False,
    ) -> float:
        """Simply compounded forward rate between two dates."""
        dcc = self._day_counter if day_count is None else get_day_count_convention(day_count)
        alpha = dcc.year_fraction(start, end)
        if alpha <= 0:
            raise ValueError("Forward period must be positive")
        df_u = self.discount(start, extrapolate)
        df_v = self.discount(end, extrapolate)
        return (df_u / df_v - 1.0) / alpha

    @abstractmethod
    def _discount_impl(self, t: float) -> float:
        """Discount factor at time t; range checks already done."""

    def __str__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.name})"
            if self.name
            else self.__class__.__name__
        )


class FlatForwardCurve(YieldTermStructure, Observable, Observer):
    """Curve with a single continuously compounded rate.

    The rate can be a :class:`~ficcurve.schema.quotes.Quote`; changing it
    notifies everything built on the curve.
    """

    def __init__(
        self,
        reference_date: Union[date, datetime],
        rate: Union[float, Quote],
        day_counter: Union[str, DayCountConvention] = "ACT/365F",
        name: str = "",
    ):
        YieldTermStructure.__init__(self, day_counter, name)
        Observable.__init__(self)
        Observer.__init__(self)
        if isinstance(reference_date, datetime):
            reference_date = reference_date.date()
        self._reference_date = reference_date
        self._rate = as_quote(rate)
        self.watch(self._rate)

    @property
    def reference_date(self) -> date:
        return self._reference_date

    @property
    def max_date(self) -> date:
        # latest date QuantLib can represent
        return date(2199, 12, 31)

    @property
    def max_time(self) -> float:
        return math.inf

    @property
    def rate(self) -> float:
        return self._rate.value()

    def _discount_impl(self, t: float) -> float:
        return math.exp(-self._rate.value() * t)
