"""Fixed-width 64-bit image hash model."""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from image_hash.core.errors import BitIndexError, FormatError, MismatchError

HASH_BITS = 64
HASH_BYTES = HASH_BITS // 8
_MAX_BITS_VALUE = (1 << HASH_BITS) - 1
_HEX_PATTERN = re.compile(r"[0-9a-fA-F]{16}")


class HashAlgorithm(StrEnum):
    """Algorithm that produced a hash."""

    AVERAGE = "average"  # aHash: pixel > mean
    MEDIAN = "median"  # mHash: pixel >= median
    DIFFERENCE = "difference"  # dHash: neighbour gradients
    WAVELET = "wavelet"  # wHash: Haar low-frequency band
    PERCEPTUAL = "perceptual"  # pHash: DCT low-frequency band


class HashDirection(StrEnum):
    """Gradient direction sampled by the difference hash."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


def parse_algorithm(value: HashAlgorithm | str) -> HashAlgorithm:
    """Resolve an algorithm name, raising FormatError for unknown names."""
    if isinstance(value, HashAlgorithm):
        return value
    try:
        return HashAlgorithm(value)
    except ValueError:
        msg = f"Unknown hash algorithm: {value!r}"
        raise FormatError(msg) from None


class ImageHash(BaseModel):
    """A 64-bit perceptual fingerprint tagged with its producing algorithm.

    Bits are written most-significant first while an algorithm builds the
    hash; after that the value is treated as read-only. Comparisons are only
    defined between hashes of the same algorithm.

    Usage:
        >>> h = ImageHash.from_string("average:0000000000000000")
        >>> h.algorithm
        <HashAlgorithm.AVERAGE: 'average'>
    """

    model_config = ConfigDict(strict=True)

    bits: int = 0
    algorithm: HashAlgorithm

    @field_validator("bits")
    @classmethod
    def validate_bits(cls, value: int) -> int:
        """Bits must fit in an unsigned 64-bit integer."""
        if value < 0 or value > _MAX_BITS_VALUE:
            msg = "bits must be between 0 and 2**64 - 1"
            raise ValueError(msg)
        return value

    # --- construction -----------------------------------------------------

    @classmethod
    def from_hex(cls, hex_string: str, algorithm: HashAlgorithm | str) -> ImageHash:
        """Create a hash from its 16-digit hex form."""
        if not _HEX_PATTERN.fullmatch(hex_string):
            msg = f"Hash hex string must be 16 hex digits (64 bits), got {hex_string!r}"
            raise FormatError(msg)
        return cls(bits=int(hex_string, 16), algorithm=parse_algorithm(algorithm))

    @classmethod
    def from_bytes(cls, data: bytes | bytearray, algorithm: HashAlgorithm | str) -> ImageHash:
        """Create a hash from 8 big-endian bytes."""
        if len(data) != HASH_BYTES:
            msg = f"Hash bytes must be {HASH_BYTES} bytes (64 bits), got {len(data)}"
            raise FormatError(msg)
        return cls(bits=int.from_bytes(data, "big"), algorithm=parse_algorithm(algorithm))

    @classmethod
    def from_string(cls, hash_string: str) -> ImageHash:
        """Parse the combined form, e.g. 'perceptual:1a2b3c4d5e6f7890'."""
        parts = hash_string.split(":")
        if len(parts) != 2:
            msg = f"Invalid hash string format: {hash_string!r}"
            raise FormatError(msg)
        name, hex_string = parts
        return cls.from_hex(hex_string, parse_algorithm(name))

    # --- bit access ---------------------------------------------------------

    def set_bit(self, index: int) -> None:
        """Set the bit at index (0 is least significant)."""
        _check_index(index)
        self.bits |= 1 << index

    def get_bit(self, index: int) -> bool:
        """Return whether the bit at index is set."""
        _check_index(index)
        return (self.bits >> index) & 1 == 1

    # --- comparison ---------------------------------------------------------

    def distance(self, other: ImageHash) -> int:
        """Hamming distance between two hashes of the same algorithm."""
        if self.algorithm != other.algorithm:
            msg = f"Image hash algorithm mismatch: {self.algorithm} vs {other.algorithm}"
            raise MismatchError(msg)
        return (self.bits ^ other.bits).bit_count()

    def similarity(self, other: ImageHash) -> float:
        """Similarity from 0.0 (every bit differs) to 1.0 (identical)."""
        return 1.0 - self.distance(other) / float(HASH_BITS)

    def is_similar(self, other: ImageHash, threshold: float = 0.9) -> bool:
        """Check whether similarity reaches threshold."""
        return self.similarity(other) >= threshold

    # --- serialization ------------------------------------------------------

    def to_hex(self) -> str:
        """Zero-padded lowercase hex, 16 characters."""
        return f"{self.bits:016x}"

    def to_bytes(self) -> bytes:
        """8-byte big-endian encoding; the algorithm is not included."""
        return self.bits.to_bytes(HASH_BYTES, "big")

    def __str__(self) -> str:
        return f"{self.algorithm.value}:{self.to_hex()}"

    def __hash__(self) -> int:
        return hash((self.bits, self.algorithm))


def _check_index(index: int) -> None:
    if index < 0 or index >= HASH_BITS:
        msg = f"Bit index out of range: {index}"
        raise BitIndexError(msg)
