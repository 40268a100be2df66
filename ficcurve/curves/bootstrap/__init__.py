"""Bootstrap module for curve construction."""

from .config import BootstrapConfig
from .engine import IterativeBootstrap
from .results import BootstrapReport, PillarResult

__all__ = [
    "BootstrapConfig",
    "IterativeBootstrap",
    "BootstrapReport",
    "PillarResult",
]
