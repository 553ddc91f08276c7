"""
Configuration module for wavelet variance estimation.

This module contains all the runtime defaults and numerical constants used
throughout the decomposition, estimation and confidence interval code.
"""

from typing import Final

# ==================== Decomposition Defaults ====================

DECOMPOSITION: Final[str] = "modwt"     # "dwt" or "modwt"
FILTER: Final[str] = "haar"             # wavelet family
EXCLUDE_BOUNDARY: Final[bool] = True    # drop wrapped (boundary) coefficients
MIN_SAMPLES: Final[int] = 4             # shortest series accepted

# ==================== Estimation Defaults ====================

ROBUST: Final[bool] = False
EFFICIENCY: Final[float] = 0.6          # target Gaussian efficiency for robust
MAX_EFFICIENCY: Final[float] = 0.99     # above this use the classical estimator
ALPHA: Final[float] = 0.05              # CI is (1 - ALPHA) * 100%

# Robust iteration bounds
ROBUST_TOL: Final[float] = 1e-6         # relative change in scale
ROBUST_MAX_ITER: Final[int] = 100

# Bracket for the biweight tuning constant search. E[Z chi'(Z)] changes sign
# once inside it (near c ~ 1.93); the efficiency only rises with c above that.
BIWEIGHT_C_MIN: Final[float] = 1.5
BIWEIGHT_C_MAX: Final[float] = 50.0

# Levels with fewer valid coefficients are flagged degenerate
MIN_VALID_COEFFICIENTS: Final[int] = 1

# ==================== Scale Defaults ====================

FREQ: Final[float] = 1.0

# ==================== Parallel processing ====================

N_JOBS: Final[int] = 1                  # per-level workers (joblib)

# Numerical stability constants
EPSILON: Final[float] = 1e-12

# ==================== Validation Functions ====================

def validate_config() -> None:
    """Validate configuration parameters."""
    if DECOMPOSITION not in ("dwt", "modwt"):
        raise ValueError("DECOMPOSITION must be 'dwt' or 'modwt'")
    if MIN_SAMPLES < 2:
        raise ValueError("MIN_SAMPLES must be at least 2")
    if not 0 < EFFICIENCY <= MAX_EFFICIENCY:
        raise ValueError("EFFICIENCY must be in (0, MAX_EFFICIENCY]")
    if not 0 < MAX_EFFICIENCY < 1:
        raise ValueError("MAX_EFFICIENCY must be between 0 and 1")
    if ALPHA <= 0 or ALPHA >= 1:
        raise ValueError("ALPHA must be between 0 and 1")
    if ROBUST_TOL <= 0:
        raise ValueError("ROBUST_TOL must be positive")
    if ROBUST_MAX_ITER <= 0:
        raise ValueError("ROBUST_MAX_ITER must be positive")
    if not 0 < BIWEIGHT_C_MIN < BIWEIGHT_C_MAX:
        raise ValueError("BIWEIGHT_C_MIN must be positive and below BIWEIGHT_C_MAX")
    if FREQ <= 0:
        raise ValueError("FREQ must be positive")
    if N_JOBS == 0:
        raise ValueError("N_JOBS must be non-zero")

# Validate configuration on import
validate_config()
