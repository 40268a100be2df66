"""Bootstrap configuration."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from ficcurve.errors import CurveConfigurationError


@dataclass
class BootstrapConfig:
    """Configuration for bootstrap process.

    Attributes:
        accuracy: Absolute tolerance of the per-node solver.
        repricing_tolerance: Largest |market - implied| accepted by the final
            repricing check and the joint re-solve.
        allow_negative_rates: Widen solver bounds to admit negative rates and
            increasing discount factors.
        max_iterations: Iteration ceiling; ``None`` uses the representation's.
        joint_resolve: Fall back to a joint least-squares re-solve when a node
            cannot be solved on its own.
        verbose: Log one info line per solved pillar.
    """

    accuracy: float = 1e-12
    repricing_tolerance: float = 1e-10
    allow_negative_rates: bool = False
    max_iterations: Optional[int] = None
    joint_resolve: bool = True
    verbose: bool = False

    def __post_init__(self):
        if self.accuracy <= 0.0:
            raise CurveConfigurationError(f"accuracy must be positive, got {self.accuracy}")
        if self.repricing_tolerance <= 0.0:
            raise CurveConfigurationError(
                f"repricing_tolerance must be positive, got {self.repricing_tolerance}"
            )
        if self.max_iterations is not None and self.max_iterations < 1:
            raise CurveConfigurationError(
                f"max_iterations must be at least 1, got {self.max_iterations}"
            )

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "BootstrapConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise CurveConfigurationError(f"Unknown bootstrap settings: {unknown}")
        return cls(**values)
