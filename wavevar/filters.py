"""
Wavelet filter bank.

Supplies wavelet (high-pass) and scaling (low-pass) taps in the
Percival & Walden convention. Haar is defined inline; the Daubechies
families come from PyWavelets reconstruction filters, which already
follow that convention. Additional orthonormal families can be added
with ``register_filter`` without touching the transform code.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

import numpy as np
import pywt

from .errors import UnknownFilter

_TOL = 1e-8


@dataclass(frozen=True)
class FilterTaps:
    """Immutable wavelet/scaling filter pair for one family."""
    name: str
    wavelet: Tuple[float, ...]
    scaling: Tuple[float, ...]

    def __post_init__(self):
        if len(self.wavelet) != len(self.scaling) or len(self.wavelet) < 2:
            raise ValueError(f"Filter {self.name!r}: taps must have equal length >= 2")
        if abs(sum(self.wavelet)) > _TOL:
            raise ValueError(f"Filter {self.name!r}: wavelet taps must sum to 0")
        if abs(sum(self.scaling) - math.sqrt(2.0)) > _TOL:
            raise ValueError(f"Filter {self.name!r}: scaling taps must sum to sqrt(2)")

    @property
    def length(self) -> int:
        return len(self.wavelet)

    @property
    def h(self) -> np.ndarray:
        return np.asarray(self.wavelet, dtype=float)

    @property
    def g(self) -> np.ndarray:
        return np.asarray(self.scaling, dtype=float)


def _haar() -> FilterTaps:
    s = 1.0 / math.sqrt(2.0)
    return FilterTaps("haar", wavelet=(s, -s), scaling=(s, s))


def _from_pywt(name: str, pywt_name: str) -> Callable[[], FilterTaps]:
    def build() -> FilterTaps:
        w = pywt.Wavelet(pywt_name)
        return FilterTaps(name, wavelet=tuple(w.rec_hi), scaling=tuple(w.rec_lo))
    return build


_REGISTRY: Dict[str, Callable[[], FilterTaps]] = {
    "haar": _haar,
    "d4": _from_pywt("d4", "db2"),
    "d6": _from_pywt("d6", "db3"),
    "d8": _from_pywt("d8", "db4"),
    "la8": _from_pywt("la8", "sym4"),
}


def register_filter(name: str, taps) -> None:
    """
    Register a new filter family.

    Args:
        name: Lookup name (case-insensitive)
        taps: A FilterTaps instance or a zero-argument factory returning one
    """
    key = name.lower()
    if isinstance(taps, FilterTaps):
        _REGISTRY[key] = lambda: taps
    elif callable(taps):
        _REGISTRY[key] = taps
    else:
        raise TypeError("taps must be a FilterTaps or a callable returning one")


def available_filters() -> Tuple[str, ...]:
    return tuple(sorted(_REGISTRY))


def filter_for(name: str) -> FilterTaps:
    """
    Look up the taps for a named wavelet family.

    Raises:
        UnknownFilter: If no family is registered under ``name``
    """
    if not isinstance(name, str) or name.lower() not in _REGISTRY:
        raise UnknownFilter(
            f"Unknown filter {name!r}. Available: {', '.join(available_filters())}"
        )
    return _REGISTRY[name.lower()]()
