"""
Common configuration parameters shared by the estimation entry points.
"""

import math
import numbers
from typing import Dict, Any

from .. import config as cfg
from ..errors import EfficiencyTooHigh, InvalidConfidenceLevel, InvalidInput


class CommonConfig:
    """
    Default options for a wavelet variance run.

    Keys mirror the keyword arguments of ``wavevar.wvar``.
    """

    @classmethod
    def get_default_config(cls) -> Dict[str, Any]:
        """
        Get default configuration dictionary.

        Returns:
            Dictionary with default configuration values
        """
        return {
            'decomp': cfg.DECOMPOSITION,
            'filter': cfg.FILTER,
            'nlevels': None,
            'robust': cfg.ROBUST,
            'eff': cfg.EFFICIENCY,
            'alpha': cfg.ALPHA,
            'exclude_boundary': cfg.EXCLUDE_BOUNDARY,
            'tol': cfg.ROBUST_TOL,
            'max_iter': cfg.ROBUST_MAX_ITER,
            'n_jobs': cfg.N_JOBS,
        }

    @classmethod
    def validate_common_config(cls, config: Dict[str, Any]) -> None:
        """
        Validate user supplied configuration parameters.

        Args:
            config: Configuration dictionary to validate

        Raises:
            InvalidInput: If a structural option is invalid
            EfficiencyTooHigh: If a robust run asks for efficiency above the cap
            InvalidConfidenceLevel: If alpha is outside (0, 1)
        """
        if 'decomp' in config and str(config['decomp']).lower() not in ('dwt', 'modwt'):
            raise InvalidInput(f"decomp must be 'dwt' or 'modwt', got {config['decomp']!r}")

        nlevels = config.get('nlevels')
        if nlevels is not None and (isinstance(nlevels, bool) or not isinstance(nlevels, numbers.Real)
                                    or not math.isfinite(nlevels) or int(nlevels) != nlevels
                                    or nlevels < 1):
            raise InvalidInput(f"nlevels must be a positive integer, got {nlevels!r}")

        alpha = config.get('alpha', cfg.ALPHA)
        if isinstance(alpha, bool) or not isinstance(alpha, numbers.Real) or not 0 < alpha < 1:
            raise InvalidConfidenceLevel(f"alpha must be in (0, 1), got {alpha!r}")

        eff = config.get('eff', cfg.EFFICIENCY)
        if config.get('robust', cfg.ROBUST):
            if isinstance(eff, bool) or not isinstance(eff, numbers.Real) or math.isnan(eff):
                raise InvalidInput(f"eff must be a number in (0, 0.99], got {eff!r}")
            if eff > cfg.MAX_EFFICIENCY:
                raise EfficiencyTooHigh(
                    "The efficiency specified is too close to the classical case. "
                    "Use robust=False"
                )
            if eff <= 0:
                raise InvalidInput("eff must be in (0, 0.99]")

        if 'tol' in config and (not isinstance(config['tol'], numbers.Real) or not config['tol'] > 0):
            raise InvalidInput("tol must be positive")

        if 'max_iter' in config and (not isinstance(config['max_iter'], numbers.Integral)
                                      or config['max_iter'] <= 0):
            raise InvalidInput("max_iter must be positive")

        if 'n_jobs' in config and config['n_jobs'] == 0:
            raise InvalidInput("n_jobs must be non-zero")
