"""Perceptual image hashing: 64-bit fingerprints for near-duplicate detection."""

from image_hash.core.comparison import batch_compare_distance, batch_compare_similarity
from image_hash.core.errors import (
    BitIndexError,
    FormatError,
    ImageDecodeError,
    ImageHashError,
    MismatchError,
    SizeError,
)
from image_hash.core.hashers import (
    average_hash,
    compute_hash,
    difference_hash,
    median_hash,
    perceptual_hash,
    wavelet_hash,
)
from image_hash.models.image_hash import HashAlgorithm, HashDirection, ImageHash

__all__ = [
    "BitIndexError",
    "FormatError",
    "HashAlgorithm",
    "HashDirection",
    "ImageDecodeError",
    "ImageHash",
    "ImageHashError",
    "MismatchError",
    "SizeError",
    "average_hash",
    "batch_compare_distance",
    "batch_compare_similarity",
    "compute_hash",
    "difference_hash",
    "median_hash",
    "perceptual_hash",
    "wavelet_hash",
]
