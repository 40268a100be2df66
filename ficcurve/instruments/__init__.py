"""Calibration instruments (rate helpers) and their conventions."""

from .base import RateHelper, RelativeDateRateHelper
from .basis_swap import EURIBOR_3M_6M_BASIS, BasisSwapConvention, BasisSwapRateHelper
from .deposit import (
    ESTR_DEPOSIT,
    EURIBOR_DEPOSIT,
    DepositConvention,
    DepositRateHelper,
)
from .factory import create_helper_from_quote
from .fra import FraRateHelper
from .futures import EURIBOR_3M_FUTURES, FuturesConvention, FuturesRateHelper
from .swap import (
    EUR_FIXED_ANNUAL,
    EURIBOR_3M_FLOATING,
    EURIBOR_6M_FLOATING,
    SwapLegConvention,
    SwapRateHelper,
)

__all__ = [
    "RateHelper",
    "RelativeDateRateHelper",
    "DepositConvention",
    "DepositRateHelper",
    "FraRateHelper",
    "FuturesConvention",
    "FuturesRateHelper",
    "SwapLegConvention",
    "SwapRateHelper",
    "BasisSwapConvention",
    "BasisSwapRateHelper",
    "create_helper_from_quote",
    "EURIBOR_DEPOSIT",
    "ESTR_DEPOSIT",
    "EURIBOR_3M_FUTURES",
    "EUR_FIXED_ANNUAL",
    "EURIBOR_3M_FLOATING",
    "EURIBOR_6M_FLOATING",
    "EURIBOR_3M_6M_BASIS",
]
