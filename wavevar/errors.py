"""
Error taxonomy for wavelet variance estimation.

Hard failures are raised at the violated precondition. Non-fatal anomalies
are reported with ``WaveletVarianceWarning`` and recorded on the result.
"""


class WaveletVarianceError(Exception):
    """Base class for all wavevar failures."""


class InvalidInput(WaveletVarianceError, ValueError):
    """Empty, non-numeric or non-finite series, or a bad sampling frequency."""


class InsufficientLength(WaveletVarianceError, ValueError):
    """Too few samples for the requested levels or filter width."""


class UnknownFilter(WaveletVarianceError, ValueError):
    """No filter is registered under the requested name."""


class EfficiencyTooHigh(WaveletVarianceError, ValueError):
    """Robust efficiency too close to the classical case."""


class InvalidConfidenceLevel(WaveletVarianceError, ValueError):
    """Alpha outside the open interval (0, 1)."""


class UnsupportedUnit(WaveletVarianceError, ValueError):
    """Unit string not in the supported unit table."""


class NoResultsGiven(WaveletVarianceError, ValueError):
    """Comparison requested without any result."""


class TypeMismatch(WaveletVarianceError, TypeError):
    """Comparison input is not a WaveletVarianceResult."""


class WaveletVarianceWarning(UserWarning):
    """Non-fatal anomaly: truncation, unit no-op, degenerate level, non-convergence."""
