"""
Market quote objects.

``Quote`` is an observable scalar: instruments and curves register with it so
that a new market value invalidates everything built on top of it.
``MarketQuote`` is the plain record used to describe an instrument quote
before a calibration helper is created from it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

from ficcurve.patterns import Observable


class Quote(Observable, ABC):
    """Observable market value."""

    @abstractmethod
    def value(self) -> float:
        """Current value; raises if the quote is not valid."""

    @abstractmethod
    def is_valid(self) -> bool:
        """Whether the quote currently holds a usable value."""


class SimpleQuote(Quote):
    """Quote holding a settable value."""

    def __init__(self, value: Optional[float] = None):
        super().__init__()
        self._value = None if value is None else float(value)

    def value(self) -> float:
        if self._value is None:
            raise ValueError("invalid SimpleQuote: no value set")
        return self._value

    def is_valid(self) -> bool:
        return self._value is not None

    def set_value(self, value: Optional[float]) -> float:
        """Set a new value and notify observers if it changed.

        Returns:
            The difference between the new and the old value (0.0 when either
            side is unset).
        """
        new_value = None if value is None else float(value)
        old_value = self._value
        if new_value == old_value:
            return 0.0
        self._value = new_value
        self.notify_observers()
        if new_value is None or old_value is None:
            return 0.0
        return new_value - old_value

    def reset(self) -> None:
        self.set_value(None)

    def __repr__(self) -> str:
        return f"SimpleQuote({self._value})"


def as_quote(value: Union[float, Quote]) -> Quote:
    """Wrap a plain number into a :class:`SimpleQuote`."""
    if isinstance(value, Quote):
        return value
    return SimpleQuote(value)


@dataclass
class MarketQuote:
    """Tenor/rate record for a calibration instrument.

    ``instrument`` is the convention object describing the product
    (e.g. a :class:`~ficcurve.instruments.deposit.DepositConvention`).
    Rates above 1.0 are read as percentages.
    """

    tenor: str
    rate: float
    instrument: object

    @property
    def decimal_rate(self) -> float:
        return self.rate / 100.0 if self.rate > 1.0 else self.rate
