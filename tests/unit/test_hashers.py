"""Unit tests for the five hashing algorithms (pure functions, synthetic grids)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest
from scipy.fft import idctn

from image_hash.core.errors import SizeError
from image_hash.core.hashers import (
    HASH_FUNCTIONS,
    average_hash,
    compute_hash,
    default_size,
    difference_hash,
    grid_shape,
    median_hash,
    perceptual_hash,
    wavelet_hash,
)
from image_hash.models.image_hash import HashAlgorithm, HashDirection

if TYPE_CHECKING:
    from collections.abc import Callable

ALL_ONES = (1 << 64) - 1


def _uniform(width: int, height: int, value: int = 128) -> list[list[int]]:
    return [[value] * width for _ in range(height)]


def _half_split(size: int = 8) -> list[list[int]]:
    """Left half black, right half white."""
    return [[0] * (size // 2) + [255] * (size // 2) for _ in range(size)]


# ──────────────────────────────────────────────────────────────────────
# Average hash
# ──────────────────────────────────────────────────────────────────────


class TestAverageHash:
    """Tests for average_hash."""

    def test_uniform_grid_is_all_zero(self) -> None:
        h = average_hash(_uniform(8, 8))
        assert h.bits == 0
        assert h.algorithm == HashAlgorithm.AVERAGE

    def test_half_split(self) -> None:
        assert average_hash(_half_split()).bits == 0x0F0F0F0F0F0F0F0F

    def test_strictly_greater_than_mean(self) -> None:
        # mean is exactly 10; only the 20 exceeds it
        h = average_hash([[0, 10], [10, 20]], size=2)
        assert h.bits == 1 << 60

    def test_small_size_fills_from_the_top(self) -> None:
        grid = _uniform(4, 4, value=0)
        grid[0][0] = 255
        assert average_hash(grid, size=4).bits == 1 << 63

    def test_size_over_budget(self) -> None:
        with pytest.raises(SizeError):
            average_hash(_uniform(9, 9), size=9)

    def test_size_zero(self) -> None:
        with pytest.raises(SizeError):
            average_hash([], size=0)

    def test_grid_shape_mismatch(self) -> None:
        with pytest.raises(SizeError, match="Expected a 8x8 grid"):
            average_hash(_uniform(8, 7))


# ──────────────────────────────────────────────────────────────────────
# Median hash
# ──────────────────────────────────────────────────────────────────────


class TestMedianHash:
    """Tests for median_hash."""

    def test_uniform_grid_is_all_ones(self) -> None:
        assert median_hash(_uniform(8, 8)).bits == ALL_ONES

    def test_half_split(self) -> None:
        assert median_hash(_half_split()).bits == 0x0F0F0F0F0F0F0F0F

    def test_even_count_floors_central_mean(self) -> None:
        # median = (2 + 3) // 2 = 2; pixels 2, 3, 4 are >= 2
        h = median_hash([[1, 2], [3, 4]], size=2)
        assert h.bits == 0x7000000000000000

    def test_odd_count_uses_central_value(self) -> None:
        grid = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
        assert median_hash(grid, size=3).bits == 0x0F80000000000000

    def test_inclusive_unlike_average(self) -> None:
        grid = [[0, 10], [10, 20]]
        assert median_hash(grid, size=2).bits == 0x7000000000000000
        assert average_hash(grid, size=2).bits == 0x1000000000000000

    def test_size_over_budget(self) -> None:
        with pytest.raises(SizeError):
            median_hash(_uniform(9, 9), size=9)


# ──────────────────────────────────────────────────────────────────────
# Difference hash
# ──────────────────────────────────────────────────────────────────────


class TestDifferenceHash:
    """Tests for difference_hash in all three directions."""

    def test_horizontal_increasing(self) -> None:
        grid = [[x * 10 for x in range(9)] for _ in range(8)]
        assert difference_hash(grid).bits == ALL_ONES

    def test_horizontal_decreasing(self) -> None:
        grid = [[(8 - x) * 10 for x in range(9)] for _ in range(8)]
        assert difference_hash(grid).bits == 0

    def test_equal_neighbours_are_zero(self) -> None:
        assert difference_hash(_uniform(9, 8)).bits == 0

    def test_vertical_increasing(self) -> None:
        grid = [[y * 10] * 8 for y in range(9)]
        h = difference_hash(grid, direction=HashDirection.VERTICAL)
        assert h.bits == ALL_ONES
        assert h.algorithm == HashAlgorithm.DIFFERENCE

    def test_vertical_walks_columns(self) -> None:
        # column 0 increases, column 1 decreases
        grid = [[0, 9], [5, 5], [9, 0]]
        h = difference_hash(grid, size=2, direction=HashDirection.VERTICAL)
        assert h.bits == 0xC000000000000000

    def test_both_horizontal_bits_first(self) -> None:
        grid = [[x for x in range(6)] for _ in range(6)]
        h = difference_hash(grid, size=6, direction=HashDirection.BOTH)
        assert h.bits == ((1 << 30) - 1) << 34

    def test_both_fills_sixty_bits(self) -> None:
        grid = [[x + y for x in range(6)] for y in range(6)]
        h = difference_hash(grid, size=6, direction=HashDirection.BOTH)
        assert h.bits == 0xFFFFFFFFFFFFFFF0

    def test_both_over_budget(self) -> None:
        with pytest.raises(SizeError, match="bidirectional"):
            difference_hash(_uniform(8, 8), direction=HashDirection.BOTH)

    def test_horizontal_truncates_at_64_bits(self) -> None:
        grid = [[x for x in range(10)] for _ in range(9)]
        assert difference_hash(grid, size=9).bits == ALL_ONES

    def test_horizontal_needs_wider_grid(self) -> None:
        with pytest.raises(SizeError):
            difference_hash(_uniform(8, 8))


# ──────────────────────────────────────────────────────────────────────
# Wavelet hash
# ──────────────────────────────────────────────────────────────────────


class TestWaveletHash:
    """Tests for wavelet_hash."""

    def test_uniform_grid_sets_only_the_average(self) -> None:
        assert wavelet_hash(_uniform(8, 8, value=100)).bits == 1 << 63

    def test_black_grid_is_zero(self) -> None:
        assert wavelet_hash(_uniform(8, 8, value=0)).bits == 0

    def test_larger_power_of_two(self) -> None:
        assert wavelet_hash(_uniform(16, 16, value=100), size=16).bits == 1 << 63

    def test_at_most_half_the_bits(self, random_grid_8: list[list[int]]) -> None:
        assert wavelet_hash(random_grid_8).bits.bit_count() <= 32

    def test_deterministic(self, random_grid_8: list[list[int]]) -> None:
        assert wavelet_hash(random_grid_8) == wavelet_hash(random_grid_8)

    @pytest.mark.parametrize("size", [4, 12, 24])
    def test_rejects_unsupported_sizes(self, size: int) -> None:
        with pytest.raises(SizeError):
            wavelet_hash(_uniform(size, size), size=size)


# ──────────────────────────────────────────────────────────────────────
# Perceptual hash
# ──────────────────────────────────────────────────────────────────────


class TestPerceptualHash:
    """Tests for perceptual_hash."""

    @pytest.mark.parametrize("size", [4, 7])
    def test_size_below_minimum(self, size: int) -> None:
        with pytest.raises(SizeError):
            perceptual_hash(_uniform(size, size), size=size)

    def test_lowest_bit_always_clear(self, grid_factory: Callable[..., list[list[int]]]) -> None:
        for seed in range(5):
            assert perceptual_hash(grid_factory(32, 32, seed)).get_bit(0) is False

    def test_at_most_31_bits_above_median(self, random_grid_32: list[list[int]]) -> None:
        assert perceptual_hash(random_grid_32).bits.bit_count() <= 31

    def test_minimum_size_grid(self, grid_factory: Callable[..., list[list[int]]]) -> None:
        h = perceptual_hash(grid_factory(8, 8, 1), size=8)
        assert h.algorithm == HashAlgorithm.PERCEPTUAL

    def test_brightness_shift_is_ignored(self, random_grid_32: list[list[int]]) -> None:
        darker = [[v // 2 for v in row] for row in random_grid_32]
        brighter = [[v // 2 + 100 for v in row] for row in random_grid_32]
        assert perceptual_hash(darker).distance(perceptual_hash(brighter)) == 0

    def test_inverted_grid_is_far(self, random_grid_32: list[list[int]]) -> None:
        inverted = [[255 - v for v in row] for row in random_grid_32]
        distance = perceptual_hash(random_grid_32).distance(perceptual_hash(inverted))
        assert distance > 30
        assert distance >= 60

    def test_band_maps_to_bits_without_dc(self) -> None:
        # Band (row-major): DC = -1000, coefficient 1 = 50, coefficient i = -i for i >= 2.
        # Median of the 63 AC terms is -32, so coefficients 1..31 land on bits 63..33.
        # Counting the DC term would move the median to -32.5 and also set bit 32.
        coefficients = np.zeros((8, 8))
        flat = coefficients.reshape(-1)
        flat[0] = -1000.0
        flat[1] = 50.0
        flat[2:] = -np.arange(2, 64)
        grid = idctn(coefficients, norm="ortho").tolist()

        h = perceptual_hash(grid, size=8)
        assert h.bits == ((1 << 31) - 1) << 33
        assert h.get_bit(63) is True
        assert h.get_bit(32) is False


# ──────────────────────────────────────────────────────────────────────
# Dispatch
# ──────────────────────────────────────────────────────────────────────


class TestDispatch:
    """Tests for compute_hash, default_size and grid_shape."""

    def test_every_algorithm_registered(self) -> None:
        assert set(HASH_FUNCTIONS) == set(HashAlgorithm)

    @pytest.mark.parametrize(
        ("algorithm", "expected"),
        [
            (HashAlgorithm.AVERAGE, 8),
            (HashAlgorithm.MEDIAN, 8),
            (HashAlgorithm.DIFFERENCE, 8),
            (HashAlgorithm.WAVELET, 8),
            (HashAlgorithm.PERCEPTUAL, 32),
        ],
    )
    def test_default_sizes(self, algorithm: HashAlgorithm, expected: int) -> None:
        assert default_size(algorithm) == expected

    @pytest.mark.parametrize(
        ("direction", "expected"),
        [
            (HashDirection.HORIZONTAL, (9, 8)),
            (HashDirection.VERTICAL, (8, 9)),
            (HashDirection.BOTH, (8, 8)),
        ],
    )
    def test_difference_grid_shapes(
        self, direction: HashDirection, expected: tuple[int, int]
    ) -> None:
        assert grid_shape(HashAlgorithm.DIFFERENCE, 8, direction) == expected

    def test_square_grid_for_other_algorithms(self) -> None:
        assert grid_shape(HashAlgorithm.PERCEPTUAL, 32) == (32, 32)

    def test_compute_hash_uses_default_size(self, random_grid_32: list[list[int]]) -> None:
        assert compute_hash(HashAlgorithm.PERCEPTUAL, random_grid_32) == perceptual_hash(
            random_grid_32
        )

    def test_compute_hash_passes_direction(self) -> None:
        grid = [[y * 10] * 8 for y in range(9)]
        h = compute_hash(HashAlgorithm.DIFFERENCE, grid, direction=HashDirection.VERTICAL)
        assert h.bits == ALL_ONES

    def test_direction_only_reaches_difference(self) -> None:
        grid = _uniform(8, 8, value=100)
        h = compute_hash(HashAlgorithm.WAVELET, grid, direction=HashDirection.BOTH)
        assert h == wavelet_hash(grid)
        with pytest.raises(TypeError):
            wavelet_hash(grid, direction=HashDirection.BOTH)  # type: ignore[call-arg]

    def test_accepts_numpy_grid(self, random_grid_8: list[list[int]]) -> None:
        pixels = np.array(random_grid_8, dtype=np.uint8)
        assert median_hash(pixels) == median_hash(random_grid_8)
        assert average_hash(pixels) == average_hash(random_grid_8)

    def test_compute_hash_validates_size(self) -> None:
        with pytest.raises(SizeError):
            compute_hash(HashAlgorithm.AVERAGE, _uniform(9, 9), size=9)
