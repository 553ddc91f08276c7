"""
Scale axis and physical unit conversion.
"""

import logging
import warnings
from typing import NamedTuple, Optional

import numpy as np

from .base.utils import validate_frequency
from .errors import InvalidInput, UnsupportedUnit, WaveletVarianceWarning

logger = logging.getLogger(__name__)

# canonical units, finest first, and the factor between neighbours
UNITS = ('ns', 'ms', 'sec', 'min', 'hour', 'day', 'month', 'year')
_STEPS = (1e6, 1e3, 60.0, 60.0, 24.0, 30.0, 12.0)

_ALIASES = {
    'ns': 'ns', 'nanosecond': 'ns',
    'ms': 'ms', 'millisecond': 'ms',
    'sec': 'sec', 'second': 'sec',
    'min': 'min', 'minute': 'min',
    'hour': 'hour',
    'day': 'day',
    'mon': 'month', 'month': 'month',
    'year': 'year',
}


class UnitConversion(NamedTuple):
    values: np.ndarray
    converted: bool
    unit: Optional[str]
    note: Optional[str] = None


def canonical_unit(unit: str) -> str:
    """
    Map a unit string or alias to its canonical name.

    Raises:
        UnsupportedUnit: If the unit is not recognised
    """
    key = unit.lower() if isinstance(unit, str) else unit
    if key not in _ALIASES:
        raise UnsupportedUnit(
            'The supported units are "ns", "ms", "sec", "min", "hour", "day", "month", "year". '
            f'Got {unit!r}'
        )
    return _ALIASES[key]


def scales(levels: int, freq: float = 1.0) -> np.ndarray:
    """Time span of each level: 2^(1..levels) / freq."""
    if isinstance(levels, bool) or int(levels) != levels or levels < 1:
        raise InvalidInput(f"levels must be a positive integer, got {levels!r}")
    freq = validate_frequency(freq)
    return 2.0 ** np.arange(1, int(levels) + 1) / freq


def convert(values, from_unit: Optional[str] = None, to_unit: Optional[str] = None) -> UnitConversion:
    """
    Rescale scale values between time units.

    A target without a source unit is a no-op reported through
    ``WaveletVarianceWarning``.

    Returns:
        UnitConversion(values, converted, unit, note)

    Raises:
        UnsupportedUnit: If either unit is not recognised
    """
    src = canonical_unit(from_unit) if from_unit is not None else None
    dst = canonical_unit(to_unit) if to_unit is not None else None
    x = np.asarray(values, dtype=float)

    if src is None:
        if dst is None:
            return UnitConversion(x, False, None)
        note = "'from_unit' is None. Unit conversion was not done."
        warnings.warn(note, WaveletVarianceWarning, stacklevel=2)
        return UnitConversion(x, False, None, note)

    if dst is None or dst == src:
        return UnitConversion(x, False, from_unit if dst is None else to_unit)

    i, j = UNITS.index(src), UNITS.index(dst)
    ratio = float(np.prod(_STEPS[min(i, j):max(i, j)]))
    out = x / ratio if j > i else x * ratio
    logger.info("Unit of object is converted from %s to %s", from_unit, to_unit)
    return UnitConversion(out, True, to_unit)
