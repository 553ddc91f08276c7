"""
DWT / MODWT decomposition for wavelet variance estimation.

Both transforms use the pyramid algorithm with periodic boundary
treatment (Percival & Walden, 2000, ch. 4-5). The DWT keeps every
second filter output and halves the working length at each level; the
MODWT rescales the filters by 1/sqrt(2), dilates them by 2^(j-1) and
keeps the full length N at every level.
"""

import logging
import math
import warnings
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

import numpy as np

from .base.utils import validate_input_data, max_levels
from .errors import InsufficientLength, InvalidInput, WaveletVarianceWarning
from .filters import FilterTaps, filter_for

logger = logging.getLogger(__name__)

DECOMPOSITIONS = ("dwt", "modwt")


@dataclass(frozen=True)
class LevelCoefficients:
    """Wavelet coefficients of one level and their boundary flags."""
    level: int
    coefficients: np.ndarray
    boundary: np.ndarray  # True where the filter wrapped past the series start
    exclude_boundary: bool = True
    rescale: float = 1.0  # DWT: 2^(-j/2), puts coefficients on the MODWT scale

    @property
    def n_coefficients(self) -> int:
        return int(self.coefficients.size)

    @property
    def n_boundary(self) -> int:
        return int(np.count_nonzero(self.boundary))

    @property
    def valid(self) -> np.ndarray:
        """Coefficients used downstream by the estimators."""
        if self.exclude_boundary:
            return self.coefficients[~self.boundary]
        return self.coefficients

    @property
    def n_valid(self) -> int:
        return int(self.valid.size)


@dataclass(frozen=True)
class CoefficientSet:
    """Result of one decomposition run."""
    kind: str
    filter_name: str
    filter_length: int
    levels: Tuple[LevelCoefficients, ...]
    scaling: np.ndarray  # scaling coefficients of the coarsest level
    n_original: int
    n_used: int
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def n_levels(self) -> int:
        return len(self.levels)

    @property
    def truncated(self) -> bool:
        return self.n_used < self.n_original

    def __getitem__(self, j: int) -> LevelCoefficients:
        """Coefficients of level ``j`` (1-based, as in the literature)."""
        if not 1 <= j <= len(self.levels):
            raise IndexError(f"level {j} outside 1..{len(self.levels)}")
        return self.levels[j - 1]

    def __iter__(self):
        return iter(self.levels)

    def __len__(self) -> int:
        return len(self.levels)


def _readonly(a: np.ndarray) -> np.ndarray:
    a = np.ascontiguousarray(a, dtype=float)
    a.setflags(write=False)
    return a


def circular_filter(v: np.ndarray, taps: np.ndarray, step: int = 1) -> np.ndarray:
    """out[t] = sum_l taps[l] * v[(t - step*l) mod len(v)]."""
    out = np.zeros_like(v, dtype=float)
    for l, tap in enumerate(taps):
        out += tap * np.roll(v, step * l)
    return out


def modwt_boundary_count(level: int, filter_length: int, n: int) -> int:
    """Number of MODWT coefficients at ``level`` affected by the circular wrap."""
    width = (2 ** level - 1) * (filter_length - 1) + 1
    return min(width - 1, n)


def dwt_boundary_count(level: int, filter_length: int, n_level: int) -> int:
    """Number of DWT coefficients at ``level`` affected by the circular wrap."""
    count = math.ceil((filter_length - 2) * (1.0 - 2.0 ** (-level)))
    return min(max(count, 0), n_level)


def _boundary_mask(n_level: int, n_boundary: int) -> np.ndarray:
    mask = np.zeros(n_level, dtype=bool)
    mask[:n_boundary] = True
    mask.setflags(write=False)
    return mask


def _modwt(x: np.ndarray, taps: FilterTaps, J: int, exclude_boundary: bool):
    h = taps.h / math.sqrt(2.0)
    g = taps.g / math.sqrt(2.0)
    n = x.size
    v = x
    levels = []
    for j in range(1, J + 1):
        step = 2 ** (j - 1)
        w = circular_filter(v, h, step)
        v = circular_filter(v, g, step)
        nb = modwt_boundary_count(j, taps.length, n)
        levels.append(LevelCoefficients(j, _readonly(w), _boundary_mask(n, nb), exclude_boundary))
    return levels, _readonly(v)


def _dwt(x: np.ndarray, taps: FilterTaps, J: int, exclude_boundary: bool):
    h, g = taps.h, taps.g
    v = x
    levels = []
    for j in range(1, J + 1):
        w = circular_filter(v, h)[1::2]
        v = circular_filter(v, g)[1::2]
        nb = dwt_boundary_count(j, taps.length, w.size)
        levels.append(LevelCoefficients(j, _readonly(w), _boundary_mask(w.size, nb),
                                         exclude_boundary, 2.0 ** (-j / 2.0)))
    return levels, _readonly(v)


def decompose(samples, filter: Union[str, FilterTaps] = "haar", levels: Optional[int] = None,
              kind: str = "modwt", exclude_boundary: bool = True) -> CoefficientSet:
    """
    Decompose a series into wavelet coefficients per level.

    Args:
        samples: Time series values
        filter: Filter name or FilterTaps
        levels: Number of levels J, default floor(log2(N))
        kind: 'dwt' or 'modwt'
        exclude_boundary: Whether boundary coefficients are left out of the valid set

    Returns:
        CoefficientSet with J levels

    Raises:
        InvalidInput: Bad series, kind or level count
        InsufficientLength: J > floor(log2(N)) or N too short for the filter
    """
    x = validate_input_data(samples, min_samples=1)
    taps = filter if isinstance(filter, FilterTaps) else filter_for(filter)

    kind = str(kind).lower()
    if kind not in DECOMPOSITIONS:
        raise InvalidInput(f"kind must be one of {DECOMPOSITIONS}, got {kind!r}")

    n = x.size
    j_max = max_levels(n)
    if levels is None:
        if j_max < 1:
            raise InsufficientLength(f"N={n} is too short for a single decomposition level")
        levels = j_max
    if isinstance(levels, bool) or int(levels) != levels or levels < 1:
        raise InvalidInput(f"levels must be a positive integer, got {levels!r}")
    levels = int(levels)
    if levels > j_max:
        raise InsufficientLength(
            f"levels={levels} exceeds floor(log2(N))={j_max} for N={n}"
        )

    notes = []
    if kind == "dwt":
        block = 2 ** levels
        n_used = (n // block) * block
        if n_used < n:
            msg = (f"Series truncated from {n} to {n_used} samples so that its length "
                   f"is a multiple of 2^{levels} for the DWT")
            warnings.warn(msg, WaveletVarianceWarning, stacklevel=2)
            notes.append(msg)
        if n_used // 2 ** (levels - 1) < taps.length:
            raise InsufficientLength(
                f"N={n_used} is too short for filter {taps.name!r} (L={taps.length}) "
                f"at level {levels}"
            )
        x = x[:n_used]
        coefs, scaling = _dwt(x, taps, levels, exclude_boundary)
    else:
        n_used = n
        if n < taps.length:
            raise InsufficientLength(
                f"N={n} is shorter than filter {taps.name!r} (L={taps.length})"
            )
        coefs, scaling = _modwt(x, taps, levels, exclude_boundary)

    for lc in coefs:
        logger.debug("%s level %d: %d coefficients, %d valid",
                     kind, lc.level, lc.n_coefficients, lc.n_valid)

    return CoefficientSet(
        kind=kind,
        filter_name=taps.name,
        filter_length=taps.length,
        levels=tuple(coefs),
        scaling=scaling,
        n_original=n,
        n_used=n_used,
        warnings=tuple(notes),
    )
