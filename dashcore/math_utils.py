"""
CipherDash Mathematical Utilities
==================================

Entropy and dispersion estimators shared by the strength scorer, the
attack simulator and the geometry analyzer.

References:
    [1] Shannon, C. E. (1948). A Mathematical Theory of Communication.
        Bell System Technical Journal, 27(3), 379-423.
    [2] Friedman, W. F. (1922). The Index of Coincidence and Its
        Applications in Cryptanalysis. Riverbank Publication No. 22.
"""

from __future__ import annotations

import math
import string
from collections import Counter
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

FloatArray = NDArray[np.floating]

UPPERCASE_ALPHABET: str = string.ascii_uppercase


# ========================== Entropy Measures ===============================


def shannon_entropy(data: str | bytes) -> float:
    """Compute the Shannon entropy of a symbol sequence.

    .. math::

        H = -\\sum_i p_i \\, \\log_2(p_i)

    where :math:`p_i` is the relative frequency of symbol *i*. Every
    symbol counts, letters or not, so ``"AB CD"`` has five symbols.

    Args:
        data: Text or raw bytes.

    Returns:
        Entropy in bits per symbol. Returns 0.0 for empty input.
    """
    if not data:
        return 0.0

    length = len(data)
    entropy = 0.0
    for count in Counter(data).values():
        p = count / length
        entropy -= p * math.log2(p)
    return entropy


# ========================== Frequency Helpers ==============================


def letter_counts(text: str) -> Counter[str]:
    """Histogram of the uppercase letters ``A``-``Z`` in *text*.

    Lowercase and non-ASCII characters are ignored, matching the
    alphabet the cipher nodes emit.
    """
    return Counter(ch for ch in text if ch in UPPERCASE_ALPHABET)


def population_std(values: Sequence[float] | FloatArray) -> float:
    """Population standard deviation (``ddof=0``); 0.0 for empty input."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64)))


def dispersion_ratio(values: Sequence[float] | FloatArray) -> float:
    """Standard deviation expressed as a percentage of the mean.

    Returns 0.0 when the mean is zero or *values* is empty.
    """
    if len(values) == 0:
        return 0.0
    arr = np.asarray(values, dtype=np.float64)
    mean = float(arr.mean())
    if mean == 0.0:
        return 0.0
    return float(arr.std()) / mean * 100.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded towards +inf."""
    return int(math.floor(value + 0.5))
