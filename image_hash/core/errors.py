"""Error types raised by the hashing engine."""

from __future__ import annotations


class ImageHashError(Exception):
    """Base class for all image hashing errors."""


class SizeError(ImageHashError, ValueError):
    """Requested grid size is outside what an algorithm supports."""


class MismatchError(ImageHashError, ValueError):
    """Two hashes produced by different algorithms were compared."""


class FormatError(ImageHashError, ValueError):
    """A serialized hash could not be parsed."""


class BitIndexError(ImageHashError, IndexError):
    """A bit index fell outside the 64-bit hash."""


class ImageDecodeError(ImageHashError):
    """An image source could not be decoded."""
