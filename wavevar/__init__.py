"""
Wavelet Variance Package

Decomposes the variance of a time series across dyadic scales with the
DWT or MODWT, using classical or robust (biweight) estimators and
chi-squared confidence intervals.
"""

from typing import Any, Dict, Optional, Tuple

from .base import CommonConfig, validate_input_data
from .compare import JointRange, joint_range
from .config import validate_config
from .errors import (
    EfficiencyTooHigh, InsufficientLength, InvalidConfidenceLevel, InvalidInput,
    NoResultsGiven, TypeMismatch, UnknownFilter, UnsupportedUnit,
    WaveletVarianceError, WaveletVarianceWarning
)
from .estimators import LevelEstimate, estimate
from .filters import FilterTaps, filter_for, register_filter
from .intervals import interval
from .result import WaveletVarianceResult
from .transform import CoefficientSet, decompose
from .units import convert, scales
from .wvar_method import WaveletVarianceMethod

__version__ = "1.0.0"
__description__ = "Classical and robust wavelet variance estimation"


def quick_setup(**kwargs) -> Dict[str, Any]:
    """
    Default configuration with overrides applied.

    Args:
        **kwargs: Options to override (see CommonConfig.get_default_config)

    Returns:
        Configuration dictionary
    """
    config = CommonConfig.get_default_config()
    config.update(kwargs)
    return config


def wvar(x, decomp: str = "modwt", filter: str = "haar", nlevels: Optional[int] = None,
         alpha: float = 0.05, robust: bool = False, eff: float = 0.6, freq: float = 1.0,
         from_unit: Optional[str] = None, to_unit: Optional[str] = None,
         **kwargs) -> WaveletVarianceResult:
    """
    Wavelet variance of a time series.

    Args:
        x: Time series values
        decomp: 'dwt' or 'modwt'
        filter: Wavelet filter name
        nlevels: Decomposition levels, default floor(log2(len(x)))
        alpha: The interval is (1 - alpha) * 100%
        robust: Use the robust biweight estimator
        eff: Target efficiency of the robust estimator
        freq: Sampling frequency
        from_unit: Unit of the sampling interval
        to_unit: Unit the scales are converted to
        **kwargs: exclude_boundary, tol, max_iter, n_jobs

    Returns:
        WaveletVarianceResult
    """
    config = quick_setup(decomp=decomp, filter=filter, nlevels=nlevels, alpha=alpha,
                         robust=robust, eff=eff, **kwargs)
    method = WaveletVarianceMethod(config)
    return method.compute(x, freq=freq, from_unit=from_unit, to_unit=to_unit)


def robust_eda(x, eff: float = 0.6, **kwargs) -> Tuple[WaveletVarianceResult, WaveletVarianceResult, JointRange]:
    """
    Classical and robust wavelet variance of the same series.

    Returns:
        Tuple of (classical, robust, joint_range)
    """
    kwargs.pop('robust', None)
    classical = wvar(x, robust=False, eff=eff, **kwargs)
    robust = wvar(x, robust=True, eff=eff, **kwargs)
    return classical, robust, joint_range(classical, robust)


def compare_wvar(*results: WaveletVarianceResult) -> JointRange:
    """Joint scale and variance range of several results."""
    return joint_range(*results)


__all__ = [
    'wvar', 'robust_eda', 'compare_wvar', 'quick_setup', 'validate_config',
    'WaveletVarianceMethod', 'WaveletVarianceResult', 'CommonConfig', 'validate_input_data',
    'FilterTaps', 'filter_for', 'register_filter',
    'CoefficientSet', 'decompose',
    'LevelEstimate', 'estimate',
    'interval',
    'scales', 'convert',
    'JointRange', 'joint_range',
    'WaveletVarianceError', 'WaveletVarianceWarning', 'InvalidInput', 'InsufficientLength',
    'UnknownFilter', 'EfficiencyTooHigh', 'InvalidConfidenceLevel', 'UnsupportedUnit',
    'NoResultsGiven', 'TypeMismatch',
]
