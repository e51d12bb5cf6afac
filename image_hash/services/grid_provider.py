"""Decode images and sample them into grayscale intensity grids (Pillow)."""

from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from image_hash.core.errors import ImageDecodeError

DEFAULT_RESAMPLE = Image.Resampling.LANCZOS


def load_image(source: str | Path | bytes) -> Image.Image:
    """Open an image from a file path or raw encoded bytes.

    The image is fully loaded so the underlying file handle can be released.
    Images whose declared dimensions trip Pillow's decompression-bomb guard
    are rejected like any other undecodable input.
    """
    try:
        if isinstance(source, bytes):
            image = Image.open(io.BytesIO(source))
        else:
            image = Image.open(Path(source))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        label = "<bytes>" if isinstance(source, bytes) else str(source)
        msg = f"Could not decode image {label}: {exc}"
        raise ImageDecodeError(msg) from exc
    return image


def to_grayscale_grid(
    image: Image.Image,
    width: int,
    height: int,
    resample: Image.Resampling = DEFAULT_RESAMPLE,
) -> np.ndarray:
    """Resample image to width x height 8-bit luminance, returned as grid[y][x]."""
    gray = image.convert("L").resize((width, height), resample)
    return np.asarray(gray, dtype=np.uint8)
