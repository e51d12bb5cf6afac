"""Hash decoded images, encoded bytes or files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from image_hash.core.hashers import compute_hash, default_size, grid_shape, validate_parameters
from image_hash.models.image_hash import HashAlgorithm, HashDirection, parse_algorithm
from image_hash.services.grid_provider import DEFAULT_RESAMPLE, load_image, to_grayscale_grid

if TYPE_CHECKING:
    from pathlib import Path

    from PIL import Image

    from image_hash.models.image_hash import ImageHash


def hash_image(
    image: Image.Image,
    algorithm: HashAlgorithm | str = HashAlgorithm.PERCEPTUAL,
    size: int | None = None,
    direction: HashDirection = HashDirection.HORIZONTAL,
    resample: Image.Resampling = DEFAULT_RESAMPLE,
) -> ImageHash:
    """Hash a decoded image.

    Parameters are validated before the image is resampled, so an invalid
    size fails without touching pixel data.
    """
    algorithm = parse_algorithm(algorithm)
    if size is None:
        size = default_size(algorithm)
    direction = HashDirection(direction)
    validate_parameters(algorithm, size, direction)

    width, height = grid_shape(algorithm, size, direction)
    grid = to_grayscale_grid(image, width, height, resample)
    return compute_hash(algorithm, grid, size=size, direction=direction)


def hash_bytes(
    data: bytes,
    algorithm: HashAlgorithm | str = HashAlgorithm.PERCEPTUAL,
    size: int | None = None,
    direction: HashDirection = HashDirection.HORIZONTAL,
) -> ImageHash:
    """Hash an encoded image held in memory."""
    with load_image(data) as image:
        return hash_image(image, algorithm, size, direction)


def hash_file(
    path: str | Path,
    algorithm: HashAlgorithm | str = HashAlgorithm.PERCEPTUAL,
    size: int | None = None,
    direction: HashDirection = HashDirection.HORIZONTAL,
) -> ImageHash:
    """Hash an image file. Raises ImageDecodeError for unreadable files."""
    with load_image(path) as image:
        return hash_image(image, algorithm, size, direction)
