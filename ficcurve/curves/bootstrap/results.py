"""Result dataclasses for the bootstrap."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List

import pandas as pd


@dataclass(frozen=True)
class PillarResult:
    """Single pillar solved during the bootstrap."""

    index: int
    pillar_date: date
    time: float
    value: float
    iterations: int
    method: str
    repricing_error: float = float("nan")


@dataclass
class BootstrapReport:
    """Diagnostics of one successful bootstrap run."""

    pillars: List[PillarResult] = field(default_factory=list)
    solver_iterations: int = 0
    convergence_loops: int = 0
    joint_resolves: int = 0
    warm_start: bool = False

    @property
    def max_repricing_error(self) -> float:
        if not self.pillars:
            return 0.0
        return max(abs(p.repricing_error) for p in self.pillars)

    def methods(self) -> List[str]:
        return [p.method for p in self.pillars]

    def to_frame(self) -> pd.DataFrame:
        """One row per pillar, indexed by instrument index."""
        columns = [
            "index",
            "pillar_date",
            "time",
            "value",
            "iterations",
            "method",
            "repricing_error",
        ]
        rows = [
            (
                p.index,
                p.pillar_date,
                p.time,
                p.value,
                p.iterations,
                p.method,
                p.repricing_error,
            )
            for p in self.pillars
        ]
        return pd.DataFrame(rows, columns=columns).set_index("index")
