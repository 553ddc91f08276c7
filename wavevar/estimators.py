"""
Classical and robust wavelet variance estimators.

The classical estimator is the mean of the squared valid coefficients.
The robust estimator is a Tukey biweight M-estimator of scale computed by
iterative reweighting:

    sigma_{k+1}^2 = sum(w(x_i / sigma_k) * x_i^2) / (n * kappa)

with w(u) = (1 - (u/c)^2)^2 on |u| <= c and kappa = E[w(Z) Z^2] for
Z ~ N(0, 1), which makes the estimator consistent at the Gaussian. The
tuning constant c is found numerically so that the asymptotic efficiency
relative to the classical estimator,

    eff(c) = E[Z chi'(Z)]^2 / (2 * Var[chi(Z)]),   chi(u) = w(u) u^2,

matches the requested efficiency.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple, Union

import numpy as np
from scipy.integrate import quad
from scipy.optimize import brentq
from scipy.stats import norm
from statsmodels.robust.norms import TukeyBiweight
from statsmodels.robust.scale import mad

from .config import (
    BIWEIGHT_C_MAX, BIWEIGHT_C_MIN, EFFICIENCY, EPSILON, MAX_EFFICIENCY,
    MIN_VALID_COEFFICIENTS, ROBUST_MAX_ITER, ROBUST_TOL
)
from .errors import EfficiencyTooHigh, InvalidInput
from .transform import LevelCoefficients

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelEstimate:
    """Point estimate of the wavelet variance at one level."""
    level: int
    variance: float
    effective_count: float
    n_valid: int
    robust: bool
    converged: bool = True
    iterations: int = 0
    n_rejected: int = 0
    degenerate: bool = False

    def __iter__(self):
        # unpacks as (point_estimate, effective_count)
        return iter((self.variance, self.effective_count))


# =============================
# Biweight calibration
# =============================

def _chi(u, c):
    t = 1.0 - (u / c) ** 2
    return u * u * t * t


def _u_dchi(u, c):
    t = 1.0 - (u / c) ** 2
    return 2.0 * u * u * t * (1.0 - 3.0 * (u / c) ** 2)


def _gauss_integral(f, c: float) -> float:
    # integrands are even, support is [-c, c]
    value, _ = quad(lambda u: f(u) * norm.pdf(u), 0.0, c, epsabs=0.0, epsrel=1e-10, limit=200)
    return 2.0 * value


@lru_cache(maxsize=256)
def biweight_moments(c: float) -> Tuple[float, float, float]:
    """
    Gaussian moments of the biweight scale score.

    Returns:
        (kappa, var_chi, b) with kappa = E[chi(Z)], var_chi = Var[chi(Z)]
        and b = E[Z chi'(Z)]
    """
    kappa = _gauss_integral(lambda u: _chi(u, c), c)
    e_chi2 = _gauss_integral(lambda u: _chi(u, c) ** 2, c)
    b = _gauss_integral(lambda u: _u_dchi(u, c), c)
    return kappa, e_chi2 - kappa ** 2, b


def biweight_efficiency(c: float) -> float:
    """Asymptotic Gaussian efficiency of the biweight variance estimator."""
    _, var_chi, b = biweight_moments(float(c))
    return b * b / (2.0 * var_chi)


@lru_cache(maxsize=1)
def rising_branch_start() -> float:
    """
    Tuning constant where the Gaussian efficiency drops to zero.

    b = E[Z chi'(Z)] is negative for small c and crosses zero near c ~ 1.93,
    after which eff(c) = b^2 / (2 Var[chi]) increases monotonically towards 1.
    Small c also reaches moderate efficiencies, but there kappa collapses and
    the estimate is useless, so only c at or above this root is considered.
    """
    return brentq(lambda c: biweight_moments(c)[2], BIWEIGHT_C_MIN, BIWEIGHT_C_MAX, xtol=1e-12)


@lru_cache(maxsize=256)
def biweight_constant(efficiency: float) -> float:
    """Tuning constant c that attains ``efficiency`` at the Gaussian."""
    c_lo = rising_branch_start()
    if efficiency <= biweight_efficiency(c_lo):
        return c_lo
    return brentq(lambda c: biweight_efficiency(c) - efficiency,
                  c_lo, BIWEIGHT_C_MAX, xtol=1e-10)


def calibration_table(efficiencies=(0.5, 0.6, 0.7, 0.8, 0.9, 0.95, 0.99)):
    """List of (efficiency, c, kappa) triples, handy for documentation."""
    rows = []
    for e in efficiencies:
        c = biweight_constant(float(e))
        rows.append((float(e), c, biweight_moments(c)[0]))
    return rows


def check_efficiency(efficiency: float) -> float:
    if (isinstance(efficiency, bool) or not isinstance(efficiency, numbers.Real)
            or math.isnan(efficiency) or efficiency <= 0):
        raise InvalidInput(f"efficiency must be in (0, {MAX_EFFICIENCY}], got {efficiency!r}")
    if efficiency > MAX_EFFICIENCY:
        raise EfficiencyTooHigh(
            "The efficiency specified is too close to the classical case. Use robust=False"
        )
    return float(efficiency)


# =============================
# Estimators
# =============================

def classical_variance(x: np.ndarray) -> float:
    return float(np.mean(np.square(x)))


def robust_variance(x: np.ndarray, efficiency: float = EFFICIENCY, tol: float = ROBUST_TOL,
                    max_iter: int = ROBUST_MAX_ITER):
    """
    Biweight M-estimate of the variance of zero-centred coefficients.

    Returns:
        (variance, weights, converged, iterations)
    """
    c = biweight_constant(efficiency)
    kappa = biweight_moments(c)[0]
    biweight = TukeyBiweight(c=c)
    n = x.size

    sigma = float(mad(x, center=0.0))
    if sigma <= EPSILON:
        sigma = math.sqrt(classical_variance(x))
    if sigma <= 0.0:
        return 0.0, np.ones(n), True, 0

    weights = np.ones(n)
    converged = False
    it = 0
    for it in range(1, max_iter + 1):
        weights = biweight.weights(x / sigma)
        sigma_new = math.sqrt(float(np.sum(weights * x * x)) / (n * kappa))
        if sigma_new <= 0.0:
            # every coefficient rejected; keep the previous scale
            break
        rel = abs(sigma_new - sigma) / sigma
        sigma = sigma_new
        if rel < tol:
            converged = True
            break

    return sigma * sigma, weights, converged, it


def estimate(coefficients: Union[LevelCoefficients, np.ndarray], robust: bool = False,
             efficiency: float = EFFICIENCY, tol: float = ROBUST_TOL,
             max_iter: int = ROBUST_MAX_ITER, level: int = 0) -> LevelEstimate:
    """
    Reduce the coefficients of one level to a variance estimate.

    Args:
        coefficients: LevelCoefficients (its valid coefficients are used) or a raw array
        robust: Use the biweight M-estimator instead of the classical one
        efficiency: Target Gaussian efficiency for the robust estimator
        tol: Relative change in scale that stops the robust iteration
        max_iter: Maximum robust iterations
        level: Level index reported when a raw array is given

    Returns:
        LevelEstimate; unpacks as (point_estimate, effective_count)

    Raises:
        EfficiencyTooHigh: robust with efficiency > 0.99
    """
    if robust:
        efficiency = check_efficiency(efficiency)

    if isinstance(coefficients, LevelCoefficients):
        level = coefficients.level
        x = np.asarray(coefficients.valid, dtype=float) * coefficients.rescale
    else:
        x = np.asarray(coefficients, dtype=float).ravel()

    n = int(x.size)
    if n < MIN_VALID_COEFFICIENTS:
        logger.debug("level %d: %d valid coefficients, estimate is degenerate", level, n)
        return LevelEstimate(level, float("nan"), 0.0, n, robust, degenerate=True)

    if not robust:
        return LevelEstimate(level, classical_variance(x), float(n), n, False)

    variance, weights, converged, iterations = robust_variance(x, efficiency, tol, max_iter)
    achieved = biweight_efficiency(biweight_constant(efficiency))
    logger.debug("level %d: robust scale after %d iterations (converged=%s)",
                 level, iterations, converged)
    return LevelEstimate(
        level=level,
        variance=variance,
        effective_count=achieved * n,
        n_valid=n,
        robust=True,
        converged=converged,
        iterations=iterations,
        n_rejected=int(np.count_nonzero(weights == 0)),
    )
