"""Numeric transform kernels used by the frequency-domain hashes.

Kernels work along one axis of a numpy array and always return a new
array; inputs are never mutated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy.fft import dct

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import ArrayLike

# Edge of the low-frequency block the wavelet and perceptual hashes keep.
LOW_FREQUENCY_SIZE = 8


def dct_1d(samples: ArrayLike, axis: int = -1) -> np.ndarray:
    """Orthonormal type-II discrete cosine transform along axis.

    Each coefficient is scaled by sqrt(2/n); the k=0 coefficient is further
    scaled by 1/sqrt(2).
    """
    values = np.asarray(samples, dtype=np.float64)
    if values.size == 0:
        return values.copy()
    return dct(values, type=2, norm="ortho", axis=axis)


def haar_1d(samples: ArrayLike, axis: int = -1) -> np.ndarray:
    """Recursive Haar wavelet transform along axis.

    At every level the first half of the active range holds pairwise
    averages and the second half pairwise differences; the next level works
    on the averages until fewer than two values remain.
    """
    values = np.moveaxis(np.array(samples, dtype=np.float64), axis, -1)
    output = np.zeros_like(values)
    length = values.shape[-1]
    while length >= 2:
        half = length // 2
        even = values[..., 0 : 2 * half : 2]
        odd = values[..., 1 : 2 * half : 2]
        output[..., :half] = (even + odd) / 2.0
        output[..., half : 2 * half] = (even - odd) / 2.0
        values[..., :length] = output[..., :length]
        length = half
    return np.moveaxis(output, -1, axis)


def transform_2d(
    pixels: ArrayLike,
    kernel: Callable[..., np.ndarray],
) -> np.ndarray:
    """Apply a 1-D kernel to every row, then to every column of the result."""
    grid = np.asarray(pixels, dtype=np.float64)
    if grid.ndim != 2:
        msg = f"Expected a 2-D grid, got an array of shape {grid.shape}"
        raise ValueError(msg)
    return kernel(kernel(grid, axis=1), axis=0)


def low_frequency_block(
    coefficients: np.ndarray,
    block_size: int = LOW_FREQUENCY_SIZE,
) -> np.ndarray:
    """Row-major top-left block_size x block_size corner of a transformed grid."""
    return coefficients[:block_size, :block_size].flatten()


def median(values: ArrayLike) -> float:
    """Median of real values; even counts average the two central values."""
    array = np.asarray(values, dtype=np.float64)
    if array.size == 0:
        msg = "median of an empty sequence"
        raise ValueError(msg)
    return float(np.median(array))


def integer_median(values: ArrayLike) -> int:
    """Median of integer samples; even counts floor the mean of the central pair."""
    ordered = np.sort(np.asarray(values, dtype=np.int64), axis=None)
    if ordered.size == 0:
        msg = "median of an empty sequence"
        raise ValueError(msg)
    middle = ordered.size // 2
    if ordered.size % 2 == 0:
        return int(ordered[middle - 1] + ordered[middle]) // 2
    return int(ordered[middle])


def is_power_of_two(n: int) -> bool:
    """True for 1, 2, 4, 8, ..."""
    return n > 0 and n & (n - 1) == 0
