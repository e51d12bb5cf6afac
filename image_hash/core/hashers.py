"""The five hashing algorithms, each a pure function grid -> ImageHash.

A grid is a 2-D array (or a sequence of rows) of 8-bit grayscale
intensities, addressed grid[y][x]. Callers are expected to supply a grid with
exactly the shape returned by grid_shape(); parameters and shape are
validated before any bit is written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from image_hash.core.errors import SizeError
from image_hash.core.transforms import (
    LOW_FREQUENCY_SIZE,
    dct_1d,
    haar_1d,
    integer_median,
    is_power_of_two,
    low_frequency_block,
    median,
    transform_2d,
)
from image_hash.models.image_hash import HASH_BITS, HashAlgorithm, HashDirection, ImageHash

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import ArrayLike

DEFAULT_SIZES: dict[HashAlgorithm, int] = {
    HashAlgorithm.AVERAGE: 8,
    HashAlgorithm.MEDIAN: 8,
    HashAlgorithm.DIFFERENCE: 8,
    HashAlgorithm.WAVELET: 8,
    HashAlgorithm.PERCEPTUAL: 32,
}

MIN_PERCEPTUAL_SIZE = 8


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def default_size(algorithm: HashAlgorithm) -> int:
    """Grid edge length used when the caller does not choose one."""
    return DEFAULT_SIZES[algorithm]


def validate_parameters(
    algorithm: HashAlgorithm,
    size: int,
    direction: HashDirection = HashDirection.HORIZONTAL,
) -> None:
    """Raise SizeError if size is not usable for algorithm."""
    if size < 1:
        msg = f"Size must be positive, got {size}"
        raise SizeError(msg)

    if algorithm in (HashAlgorithm.AVERAGE, HashAlgorithm.MEDIAN):
        if size * size > HASH_BITS:
            msg = f"Size too large: {size}x{size} pixels would exceed {HASH_BITS} bits"
            raise SizeError(msg)
    elif algorithm == HashAlgorithm.DIFFERENCE:
        if direction == HashDirection.BOTH and 2 * size * (size - 1) > HASH_BITS:
            msg = f"Size too large for bidirectional hash: {2 * size * (size - 1)} bits"
            raise SizeError(msg)
        if direction == HashDirection.BOTH and size < 2:
            msg = "Bidirectional hash needs a size of at least 2"
            raise SizeError(msg)
    elif algorithm == HashAlgorithm.WAVELET:
        if size < LOW_FREQUENCY_SIZE or not is_power_of_two(size):
            msg = f"Wavelet size must be a power of two >= {LOW_FREQUENCY_SIZE}, got {size}"
            raise SizeError(msg)
    elif algorithm == HashAlgorithm.PERCEPTUAL:
        if size < MIN_PERCEPTUAL_SIZE:
            msg = f"Perceptual size must be at least {MIN_PERCEPTUAL_SIZE}, got {size}"
            raise SizeError(msg)


def grid_shape(
    algorithm: HashAlgorithm,
    size: int,
    direction: HashDirection = HashDirection.HORIZONTAL,
) -> tuple[int, int]:
    """(width, height) of the grid an algorithm consumes."""
    if algorithm == HashAlgorithm.DIFFERENCE:
        if direction == HashDirection.HORIZONTAL:
            return size + 1, size
        if direction == HashDirection.VERTICAL:
            return size, size + 1
    return size, size


def _prepare(
    algorithm: HashAlgorithm,
    grid: ArrayLike,
    size: int,
    direction: HashDirection = HashDirection.HORIZONTAL,
    dtype: type = np.float64,
) -> np.ndarray:
    """Validate parameters and grid shape, then return the grid as an array."""
    validate_parameters(algorithm, size, direction)
    width, height = grid_shape(algorithm, size, direction)

    rows = len(grid)
    if rows != height or any(len(row) != width for row in grid):
        cols = len(grid[0]) if rows else 0
        msg = f"Expected a {width}x{height} grid, got {cols}x{rows}"
        raise SizeError(msg)
    return np.asarray(grid, dtype=dtype)


def _from_flags(algorithm: HashAlgorithm, flags: np.ndarray) -> ImageHash:
    """Build a hash where flags[i] sets bit 63 - i."""
    bits = 0
    for i in np.flatnonzero(flags[:HASH_BITS]):
        bits |= 1 << (HASH_BITS - 1 - int(i))
    return ImageHash(bits=bits, algorithm=algorithm)


# ---------------------------------------------------------------------------
# Algorithms
# ---------------------------------------------------------------------------


def average_hash(grid: ArrayLike, size: int = 8) -> ImageHash:
    """One bit per pixel: set when the pixel is strictly brighter than the mean."""
    pixels = _prepare(HashAlgorithm.AVERAGE, grid, size)
    return _from_flags(HashAlgorithm.AVERAGE, pixels.ravel() > pixels.mean())


def median_hash(grid: ArrayLike, size: int = 8) -> ImageHash:
    """One bit per pixel: set when the pixel is at or above the median.

    Unlike average_hash the comparison is inclusive, so a uniform grid
    hashes to all ones.
    """
    pixels = _prepare(HashAlgorithm.MEDIAN, grid, size, dtype=np.int64).ravel()
    return _from_flags(HashAlgorithm.MEDIAN, pixels >= integer_median(pixels))


def difference_hash(
    grid: ArrayLike,
    size: int = 8,
    direction: HashDirection = HashDirection.HORIZONTAL,
) -> ImageHash:
    """Gradient hash: a bit is set where intensity increases toward the neighbour.

    Horizontal bits walk rows (y outer, x inner); vertical bits walk columns
    (x outer, y inner). With BOTH, horizontal bits come first. Writing stops
    once 64 bits are filled.
    """
    pixels = _prepare(HashAlgorithm.DIFFERENCE, grid, size, direction)

    parts = []
    if direction in (HashDirection.HORIZONTAL, HashDirection.BOTH):
        parts.append((pixels[:, :-1] < pixels[:, 1:]).ravel())
    if direction in (HashDirection.VERTICAL, HashDirection.BOTH):
        parts.append((pixels[:-1, :] < pixels[1:, :]).T.ravel())

    return _from_flags(HashAlgorithm.DIFFERENCE, np.concatenate(parts))


def wavelet_hash(grid: ArrayLike, size: int = 8) -> ImageHash:
    """Haar wavelet hash over the 8x8 low-frequency band."""
    pixels = _prepare(HashAlgorithm.WAVELET, grid, size)

    band = low_frequency_block(transform_2d(pixels, haar_1d))
    return _from_flags(HashAlgorithm.WAVELET, band > median(band))


def perceptual_hash(grid: ArrayLike, size: int = 32) -> ImageHash:
    """DCT hash over the 8x8 low-frequency band, ignoring the DC term.

    Coefficient i (1-based in the flattened band) maps to bit 64 - i. The
    band has 64 entries, so index 64 does not exist and bit 0 stays clear.
    """
    pixels = _prepare(HashAlgorithm.PERCEPTUAL, grid, size)

    ac_terms = low_frequency_block(transform_2d(pixels, dct_1d))[1:]
    return _from_flags(HashAlgorithm.PERCEPTUAL, ac_terms > median(ac_terms))


HASH_FUNCTIONS: dict[HashAlgorithm, Callable[..., ImageHash]] = {
    HashAlgorithm.AVERAGE: average_hash,
    HashAlgorithm.MEDIAN: median_hash,
    HashAlgorithm.DIFFERENCE: difference_hash,
    HashAlgorithm.WAVELET: wavelet_hash,
    HashAlgorithm.PERCEPTUAL: perceptual_hash,
}


def compute_hash(
    algorithm: HashAlgorithm,
    grid: ArrayLike,
    size: int | None = None,
    direction: HashDirection = HashDirection.HORIZONTAL,
) -> ImageHash:
    """Dispatch grid to the hash function registered for algorithm.

    direction only reaches the difference hash.
    """
    if size is None:
        size = default_size(algorithm)
    if algorithm == HashAlgorithm.DIFFERENCE:
        return difference_hash(grid, size=size, direction=direction)
    return HASH_FUNCTIONS[algorithm](grid, size=size)
