"""
Wavelet variance estimation method.

Runs the decomposition, the per-level estimator and the confidence
interval for one series and assembles a WaveletVarianceResult.
"""

import logging
import warnings
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from joblib import Parallel, delayed

from .base import CommonConfig, validate_frequency, validate_input_data
from .config import (
    ALPHA, DECOMPOSITION, EFFICIENCY, EXCLUDE_BOUNDARY, FILTER, N_JOBS, ROBUST,
    ROBUST_MAX_ITER, ROBUST_TOL
)
from .errors import WaveletVarianceWarning
from .estimators import LevelEstimate, estimate
from .filters import filter_for
from .intervals import eta3_dof, interval, is_degenerate
from .result import WaveletVarianceResult
from .transform import LevelCoefficients, decompose
from .units import canonical_unit, convert, scales

logger = logging.getLogger(__name__)


def _level_summary(lc: LevelCoefficients, kind: str, robust: bool, eff: float, alpha: float,
                   tol: float, max_iter: int) -> Tuple[LevelEstimate, float, float, float]:
    est = estimate(lc, robust=robust, efficiency=eff, tol=tol, max_iter=max_iter)
    dof = eta3_dof(est.effective_count, lc.level, kind)
    low, high = interval(est.variance, dof, alpha)
    return est, dof, low, high


class WaveletVarianceMethod:
    """
    Wavelet variance of a time series.

    Decomposes the series with the (MO)DWT, reduces each level to a
    classical or robust variance estimate and attaches chi-squared
    confidence intervals.
    """

    version = "1.0.0"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the method.

        Args:
            config: Options keyed like ``CommonConfig.get_default_config()``
        """
        self.config = config or {}
        self.method_name = self.__class__.__name__

        self.decomp = str(self.config.get('decomp', DECOMPOSITION)).lower()
        self.filter = self.config.get('filter', FILTER)
        self.nlevels = self.config.get('nlevels')
        self.robust = bool(self.config.get('robust', ROBUST))
        self.eff = self.config.get('eff', EFFICIENCY)
        self.alpha = self.config.get('alpha', ALPHA)
        self.exclude_boundary = self.config.get('exclude_boundary', EXCLUDE_BOUNDARY)
        self.tol = self.config.get('tol', ROBUST_TOL)
        self.max_iter = self.config.get('max_iter', ROBUST_MAX_ITER)
        self.n_jobs = self.config.get('n_jobs', N_JOBS)

        self.validate_config()

    def validate_config(self) -> None:
        """
        Validate the configuration.

        Raises:
            InvalidInput, EfficiencyTooHigh, InvalidConfidenceLevel, UnknownFilter
        """
        CommonConfig.validate_common_config({
            'decomp': self.decomp,
            'nlevels': self.nlevels,
            'robust': self.robust,
            'eff': self.eff,
            'alpha': self.alpha,
            'tol': self.tol,
            'max_iter': self.max_iter,
            'n_jobs': self.n_jobs,
        })
        filter_for(self.filter)

    def get_method_info(self) -> Dict[str, str]:
        """
        Get information about the method.

        Returns:
            Dictionary with method information
        """
        return {
            'name': self.method_name,
            'version': self.version,
            'estimator': 'robust' if self.robust else 'classical',
            'decomposition': self.decomp,
            'filter': str(self.filter),
            'nlevels': 'auto' if self.nlevels is None else str(self.nlevels),
            'efficiency': str(self.eff) if self.robust else 'n/a',
            'alpha': str(self.alpha),
        }

    def _estimate_levels(self, coefs) -> List[Tuple[LevelEstimate, float, float, float]]:
        args = (coefs.kind, self.robust, self.eff, self.alpha, self.tol, self.max_iter)
        if self.n_jobs == 1:
            return [_level_summary(lc, *args) for lc in coefs]
        return Parallel(n_jobs=self.n_jobs)(
            delayed(_level_summary)(lc, *args) for lc in coefs
        )

    def compute(self, x, freq: float = 1.0, from_unit: Optional[str] = None,
                to_unit: Optional[str] = None) -> WaveletVarianceResult:
        """
        Compute the wavelet variance of one series.

        Args:
            x: Time series values
            freq: Sampling frequency
            from_unit: Unit of the sampling interval
            to_unit: Unit the scales are converted to

        Returns:
            WaveletVarianceResult
        """
        values = validate_input_data(x)
        freq = validate_frequency(freq)
        if from_unit is not None:
            canonical_unit(from_unit)
        if to_unit is not None:
            canonical_unit(to_unit)

        coefs = decompose(values, self.filter, self.nlevels, self.decomp, self.exclude_boundary)
        notes = list(coefs.warnings)

        summaries = self._estimate_levels(coefs)
        estimates = [s[0] for s in summaries]
        dof = np.array([s[1] for s in summaries])
        ci_low = np.array([s[2] for s in summaries])
        ci_high = np.array([s[3] for s in summaries])

        degenerate = np.array([e.degenerate or is_degenerate(d) for e, d in zip(estimates, dof)])
        converged = np.array([e.converged for e in estimates])

        for e, d, bad in zip(estimates, dof, degenerate):
            logger.debug("level %d: variance=%.6g n_valid=%d dof=%.3g",
                         e.level, e.variance, e.n_valid, d)
            if bad:
                notes.append(f"Level {e.level} is degenerate ({e.n_valid} valid coefficients, "
                             f"{d:.3g} degrees of freedom)")
            if not e.converged:
                notes.append(f"Robust estimate at level {e.level} did not converge in "
                             f"{e.iterations} iterations")
        for msg in notes[len(coefs.warnings):]:
            warnings.warn(msg, WaveletVarianceWarning, stacklevel=2)

        conversion = convert(scales(coefs.n_levels, freq), from_unit, to_unit)
        if conversion.note:
            notes.append(conversion.note)
        unit = to_unit if (from_unit is not None and to_unit is not None) else from_unit

        return WaveletVarianceResult(
            variance=[e.variance for e in estimates],
            ci_low=ci_low,
            ci_high=ci_high,
            scales=conversion.values,
            decomp=coefs.kind,
            filter=coefs.filter_name,
            robust=self.robust,
            eff=float(self.eff) if self.robust else None,
            alpha=float(self.alpha),
            unit=unit,
            effective_count=[e.effective_count for e in estimates],
            dof=dof,
            n_valid=[e.n_valid for e in estimates],
            degenerate=degenerate,
            converged=converged,
            warnings=tuple(notes),
        )
