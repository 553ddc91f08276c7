"""
Common utility functions for input validation.
"""

import math
import numbers
from typing import Any

import numpy as np

from ..config import MIN_SAMPLES
from ..errors import InvalidInput


def validate_input_data(values: Any, min_samples: int = MIN_SAMPLES) -> np.ndarray:
    """
    Validate a series and return it as a 1-D float array.

    Args:
        values: Time series values (sequence, array or single-column matrix)
        min_samples: Minimum accepted length

    Returns:
        Float array of the series

    Raises:
        InvalidInput: If data is invalid
    """
    if values is None:
        raise InvalidInput("`x` must contain a value")

    try:
        x = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"`x` must be numeric: {e}") from e

    if x.ndim == 2:
        if x.shape[1] != 1:
            raise InvalidInput("There must be only one column of data supplied.")
        x = x[:, 0]
    elif x.ndim != 1:
        raise InvalidInput("`x` must be one-dimensional")

    if x.size == 0:
        raise InvalidInput("`x` must contain a value")

    if not np.all(np.isfinite(x)):
        raise InvalidInput("Values must be finite")

    if x.size < min_samples:
        raise InvalidInput(f"Time series must have at least {min_samples} observations")

    return x


def validate_frequency(freq: Any) -> float:
    """
    Validate the sampling frequency.

    Raises:
        InvalidInput: If freq is not a single positive number
    """
    if isinstance(freq, np.ndarray) and freq.ndim == 0:
        freq = freq.item()
    if isinstance(freq, bool) or not isinstance(freq, numbers.Real):
        raise InvalidInput("'freq' must be one numeric number.")
    freq = float(freq)
    if not math.isfinite(freq):
        raise InvalidInput("'freq' must be one numeric number.")
    if freq <= 0:
        raise InvalidInput("'freq' must be larger than 0.")
    return freq


def max_levels(n: int) -> int:
    """Largest decomposition depth for a series of length n, floor(log2(n))."""
    return int(n).bit_length() - 1
