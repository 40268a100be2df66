"""
Basic enums used by instruments and schedules.
"""

from enum import Enum


class Frequency(Enum):
    """Payment frequencies, valued in months."""

    ANNUAL = 12
    SEMIANNUAL = 6
    QUARTERLY = 3
    MONTHLY = 1

    def months(self) -> int:
        return self.value


class BusinessDayAdjustment(Enum):
    """Business day adjustment rules."""

    NO_ADJUSTMENT = "NO_ADJUSTMENT"
    FOLLOWING = "FOLLOWING"
    MODIFIED_FOLLOWING = "MODIFIED_FOLLOWING"
    PRECEDING = "PRECEDING"
    MODIFIED_PRECEDING = "MODIFIED_PRECEDING"


class PillarChoice(Enum):
    """Which instrument date becomes the curve node."""

    MATURITY_DATE = "MATURITY_DATE"
    LAST_RELEVANT_DATE = "LAST_RELEVANT_DATE"
    CUSTOM_DATE = "CUSTOM_DATE"
