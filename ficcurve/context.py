"""Explicit evaluation ("as-of") date shared by date-relative objects."""

from datetime import date, datetime
from typing import Union

from ficcurve.patterns import Observable


class EvaluationContext(Observable):
    """Observable as-of date.

    Instruments whose dates are defined relative to today, and curves whose
    reference date moves with today, subscribe to a context instead of reading
    ambient global state. Moving the date notifies every subscriber.
    """

    def __init__(self, as_of: Union[date, datetime]):
        super().__init__()
        self._as_of = _to_date(as_of)

    @property
    def as_of(self) -> date:
        return self._as_of

    def set_as_of(self, as_of: Union[date, datetime]) -> None:
        new_date = _to_date(as_of)
        if new_date == self._as_of:
            return
        self._as_of = new_date
        self.notify_observers()

    def __repr__(self) -> str:
        return f"EvaluationContext({self._as_of.isoformat()})"


def _to_date(dt: Union[date, datetime]) -> date:
    return dt.date() if isinstance(dt, datetime) else dt
