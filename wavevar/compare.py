"""
Joint axis ranges for comparing several wavelet variance results.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import NoResultsGiven, TypeMismatch
from .result import WaveletVarianceResult


def _log2_floor(v: float) -> float:
    if math.isnan(v):
        return v
    return float(np.floor(np.log2(v))) if v > 0 else float("-inf")


def _log2_ceil(v: float) -> float:
    if math.isnan(v):
        return v
    return float(np.ceil(np.log2(v))) if v > 0 else float("-inf")


def thin_ticks(low: float, high: float, nb_ticks: int) -> np.ndarray:
    """Integer log2 tick exponents between low and high, at most nb_ticks + 1 of them."""
    if not (math.isfinite(low) and math.isfinite(high)):
        return np.array([], dtype=int)
    low, high = int(low), int(high)
    ticks = np.arange(low, high + 1)
    if ticks.size > nb_ticks:
        step = math.ceil((high - low) / (nb_ticks + 1))
        ticks = low + step * np.arange(nb_ticks + 1)
    return ticks


@dataclass(frozen=True)
class JointRange:
    """Union of scales and CI bounds over several results."""
    scale_min: float
    scale_max: float
    variance_min: float
    variance_max: float

    def __iter__(self):
        return iter((self.scale_min, self.scale_max, self.variance_min, self.variance_max))

    @property
    def x_low(self) -> float:
        return _log2_floor(self.scale_min)

    @property
    def x_high(self) -> float:
        return _log2_ceil(self.scale_max)

    @property
    def y_low(self) -> float:
        return _log2_floor(self.variance_min)

    @property
    def y_high(self) -> float:
        return _log2_ceil(self.variance_max)

    def axis_ticks(self, axis: str = 'x', nb_ticks: Optional[int] = None) -> np.ndarray:
        """Base-2 exponents for the ticks of one axis (x: 6 ticks, y: 5 by default)."""
        if axis == 'x':
            return thin_ticks(self.x_low, self.x_high, 6 if nb_ticks is None else nb_ticks)
        if axis == 'y':
            return thin_ticks(self.y_low, self.y_high, 5 if nb_ticks is None else nb_ticks)
        raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")


def _finite(values: np.ndarray) -> np.ndarray:
    return values[np.isfinite(values)]


def joint_range(*results: WaveletVarianceResult) -> JointRange:
    """
    Range of scales and confidence bounds shared by all results.

    Raises:
        NoResultsGiven: If called without results
        TypeMismatch: If an argument is not a WaveletVarianceResult
    """
    if not results:
        raise NoResultsGiven('No object given!')
    for r in results:
        if not isinstance(r, WaveletVarianceResult):
            raise TypeMismatch(
                f"Supplied objects must be WaveletVarianceResult, got {type(r).__name__}"
            )

    scale_values = _finite(np.concatenate([r.scales for r in results]))
    bound_values = _finite(np.concatenate([np.concatenate([r.ci_low, r.ci_high]) for r in results]))
    nan = float("nan")
    return JointRange(
        scale_min=float(scale_values.min()) if scale_values.size else nan,
        scale_max=float(scale_values.max()) if scale_values.size else nan,
        variance_min=float(bound_values.min()) if bound_values.size else nan,
        variance_max=float(bound_values.max()) if bound_values.size else nan,
    )
