"""
Calibration instrument contract.

A rate helper wraps one market quote and knows how to reproduce that quote
from a yield curve. During a bootstrap the curve links itself to each helper
through a :class:`~ficcurve.patterns.handle.RelinkableHandle` and solves for
the node value that makes ``implied_quote()`` match ``quote_value()``.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, Union

from ficcurve.context import EvaluationContext
from ficcurve.conventions.types import PillarChoice
from ficcurve.errors import CurveConfigurationError, TermStructureNotLinkedError
from ficcurve.patterns import Observable, Observer, RelinkableHandle
from ficcurve.schema.quotes import Quote, as_quote


class RateHelper(Observable, Observer, ABC):
    """Market instrument used as a bootstrap target.

    A change in the quote invalidates the helper, and through it every curve
    that was built from it.
    """

    def __init__(self, quote: Union[float, Quote]):
        Observable.__init__(self)
        Observer.__init__(self)
        self._quote = as_quote(quote)
        self.watch(self._quote)
        # the curve being built is linked without observing it
        self._term_structure = RelinkableHandle(register_as_observer=False)

        self._earliest_date: Optional[date] = None
        self._maturity_date: Optional[date] = None
        self._latest_relevant_date: Optional[date] = None
        self._pillar_date: Optional[date] = None

    # ------------------------------------------------------------------
    # Quote
    # ------------------------------------------------------------------
    @property
    def quote(self) -> Quote:
        return self._quote

    def quote_value(self) -> float:
        return self._quote.value()

    def quote_is_valid(self) -> bool:
        return self._quote.is_valid()

    def quote_error(self) -> float:
        """Market quote minus the quote implied by the linked curve."""
        return self._quote.value() - self.implied_quote()

    # ------------------------------------------------------------------
    # Dates
    # ------------------------------------------------------------------
    @property
    def earliest_date(self) -> date:
        """First date on which the curve is read."""
        return self._earliest_date

    @property
    def maturity_date(self) -> date:
        return self._maturity_date

    @property
    def latest_relevant_date(self) -> date:
        """Last date on which the curve is read."""
        return self._latest_relevant_date

    @property
    def latest_date(self) -> date:
        return max(self._maturity_date, self._latest_relevant_date)

    @property
    def pillar_date(self) -> date:
        """Date of the curve node this helper calibrates."""
        return self._pillar_date

    # ------------------------------------------------------------------
    # Term structure link
    # ------------------------------------------------------------------
    def set_term_structure(self, curve) -> None:
        """Link the curve the implied quote is read from."""
        if curve is None:
            raise TermStructureNotLinkedError("null term structure given")
        self._term_structure.link_to(curve, register_as_observer=False)

    @property
    def term_structure(self):
        if self._term_structure.empty:
            raise TermStructureNotLinkedError(
                f"term structure not set for {type(self).__name__} "
                f"(pillar {self._pillar_date})"
            )
        return self._term_structure.current_link

    @abstractmethod
    def implied_quote(self) -> float:
        """Quote reproduced by the linked curve."""

    def __repr__(self) -> str:
        value = self._quote.value() if self._quote.is_valid() else None
        return f"{type(self).__name__}(quote={value}, pillar={self._pillar_date})"


class RelativeDateRateHelper(RateHelper):
    """Rate helper whose dates are defined relative to the as-of date.

    Dates are recomputed by :meth:`initialize_dates` whenever the evaluation
    context moves.
    """

    def __init__(self, quote: Union[float, Quote], context: EvaluationContext):
        super().__init__(quote)
        self._context = context
        self._evaluation_date = context.as_of
        self.watch(context)

    @property
    def context(self) -> EvaluationContext:
        return self._context

    @property
    def evaluation_date(self) -> date:
        return self._evaluation_date

    def update(self) -> bool:
        if self._evaluation_date != self._context.as_of:
            self._evaluation_date = self._context.as_of
            self.initialize_dates()
        return True

    @abstractmethod
    def initialize_dates(self) -> None:
        """Compute earliest, maturity, latest relevant and pillar dates."""


def resolve_pillar(
    choice: PillarChoice,
    earliest: date,
    maturity: date,
    latest_relevant: date,
    custom_pillar_date: Optional[date] = None,
) -> date:
    """Pick the node date for a helper according to ``choice``."""
    if choice is PillarChoice.MATURITY_DATE:
        return maturity
    if choice is PillarChoice.LAST_RELEVANT_DATE:
        return latest_relevant
    if choice is PillarChoice.CUSTOM_DATE:
        if custom_pillar_date is None:
            raise CurveConfigurationError("custom pillar date not given")
        if custom_pillar_date < earliest:
            raise CurveConfigurationError(
                f"pillar date ({custom_pillar_date}) must be later than or equal "
                f"to the earliest date ({earliest})"
            )
        if custom_pillar_date > latest_relevant:
            raise CurveConfigurationError(
                f"pillar date ({custom_pillar_date}) must be before or equal to "
                f"the latest relevant date ({latest_relevant})"
            )
        return custom_pillar_date
    raise CurveConfigurationError(f"unknown pillar choice: {choice}")
