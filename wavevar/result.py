"""
Wavelet variance result container.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np
import pandas as pd


def _frozen(values, dtype=float) -> np.ndarray:
    a = np.array(values, dtype=dtype)
    a.setflags(write=False)
    return a


@dataclass(frozen=True)
class WaveletVarianceResult:
    """
    Per-level wavelet variance with confidence bounds and run metadata.

    Attributes:
        variance: Point estimate per level
        ci_low, ci_high: Confidence bounds per level
        scales: Scale of each level in time units
        decomp: 'dwt' or 'modwt'
        filter: Wavelet filter name
        robust: Whether the robust estimator was used
        eff: Efficiency target (robust runs only)
        alpha: CI significance level, the interval is (1 - alpha) * 100%
        unit: Unit label of the scales
        effective_count: Coefficient count (robust: efficiency-discounted)
        dof: Chi-squared degrees of freedom used per level
        n_valid: Valid coefficient count per level
        degenerate: Levels whose estimate or interval is not meaningful
        converged: Whether the robust iteration converged per level
        warnings: Non-fatal anomalies met during the run
    """
    variance: np.ndarray
    ci_low: np.ndarray
    ci_high: np.ndarray
    scales: np.ndarray
    decomp: str
    filter: str
    robust: bool
    eff: Optional[float]
    alpha: float
    unit: Optional[str] = None
    effective_count: np.ndarray = field(default_factory=lambda: _frozen([]))
    dof: np.ndarray = field(default_factory=lambda: _frozen([]))
    n_valid: np.ndarray = field(default_factory=lambda: _frozen([], dtype=int))
    degenerate: np.ndarray = field(default_factory=lambda: _frozen([], dtype=bool))
    converged: np.ndarray = field(default_factory=lambda: _frozen([], dtype=bool))
    warnings: Tuple[str, ...] = ()

    def __post_init__(self):
        for name in ("variance", "ci_low", "ci_high", "scales", "effective_count", "dof"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        object.__setattr__(self, "n_valid", _frozen(self.n_valid, dtype=int))
        for name in ("degenerate", "converged"):
            object.__setattr__(self, name, _frozen(getattr(self, name), dtype=bool))
        n = self.variance.size
        if not (self.ci_low.size == self.ci_high.size == self.scales.size == n):
            raise ValueError("variance, ci_low, ci_high and scales must have the same length")

    @property
    def n_levels(self) -> int:
        return int(self.variance.size)

    @property
    def levels(self) -> np.ndarray:
        return np.arange(1, self.n_levels + 1)

    @property
    def method_name(self) -> str:
        return "robust" if self.robust else "classical"

    @property
    def confidence(self) -> float:
        return 1.0 - self.alpha

    def to_frame(self) -> pd.DataFrame:
        """Variance table indexed by scale."""
        return pd.DataFrame(
            {
                'level': self.levels,
                'variance': self.variance,
                'ci_low': self.ci_low,
                'ci_high': self.ci_high,
            },
            index=pd.Index(self.scales, name='scale'),
        )
