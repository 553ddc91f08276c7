"""
Chi-squared confidence intervals for the wavelet variance.

nu * estimate / true_variance is approximated by a chi-squared variable
with nu degrees of freedom (Percival & Walden, 2000, section 8.4). For
the MODWT the coefficients of level j are correlated and nu follows the
"eta3" rule max(M_j / 2^j, 1); for the DWT the coefficients do not
overlap and nu is the coefficient count itself. Robust estimates enter
with their equivalent count eff * M_j.
"""

import math
import numbers
from typing import Tuple

from scipy.stats import chi2

from .errors import InvalidConfidenceLevel


def check_alpha(alpha) -> float:
    if isinstance(alpha, bool) or not isinstance(alpha, numbers.Real):
        raise InvalidConfidenceLevel(f"alpha must be a number in (0, 1), got {alpha!r}")
    if not 0 < alpha < 1:
        raise InvalidConfidenceLevel(f"alpha must be in (0, 1), got {alpha!r}")
    return float(alpha)


def eta3_dof(effective_count: float, level: int, kind: str = "modwt") -> float:
    """Equivalent degrees of freedom for one level."""
    if kind == "modwt":
        return max(effective_count / 2.0 ** level, 1.0)
    return float(effective_count)


def is_degenerate(dof: float) -> bool:
    return not math.isfinite(dof) or dof < 1.0


def interval(point_estimate: float, effective_count: float, alpha: float = 0.05) -> Tuple[float, float]:
    """
    Two-sided (1 - alpha) interval for one level.

    Args:
        point_estimate: Wavelet variance estimate
        effective_count: Degrees of freedom nu
        alpha: Significance level in (0, 1)

    Returns:
        (low, high); (nan, nan) when nu <= 0 or the estimate is not finite

    Raises:
        InvalidConfidenceLevel: alpha outside (0, 1)
    """
    alpha = check_alpha(alpha)
    nu = float(effective_count)
    est = float(point_estimate)

    if not math.isfinite(est) or not nu > 0:
        return float("nan"), float("nan")
    if est == 0.0:
        return 0.0, 0.0

    low = nu * est / chi2.ppf(1.0 - alpha / 2.0, nu)
    high = nu * est / chi2.ppf(alpha / 2.0, nu)
    # for alpha near 1 the equal-tailed quantiles can both sit on one side of nu
    return min(float(low), est), max(float(high), est)
