"""Shared test fixtures for image hashing."""

from __future__ import annotations

import random
import struct
import zlib
from typing import TYPE_CHECKING

import pytest
import structlog
from PIL import Image, ImageDraw, ImageOps

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


def make_grid(width: int, height: int, seed: int = 0) -> list[list[int]]:
    """Deterministic pseudo-random grid of 8-bit intensities."""
    rng = random.Random(seed)
    return [[rng.randint(0, 255) for _ in range(width)] for _ in range(height)]


def draw_sample_image(size: int = 256) -> Image.Image:
    """RGB test image with a gradient background and a few solid shapes."""
    image = Image.new("RGB", (size, size))
    pixels = image.load()
    for y in range(size):
        for x in range(size):
            pixels[x, y] = (x * 255 // size, y * 255 // size, 128)
    draw = ImageDraw.Draw(image)
    draw.rectangle((size // 8, size // 8, size // 2, size // 3), fill=(255, 255, 255))
    draw.ellipse((size // 2, size // 2, size - size // 8, size - size // 10), fill=(0, 0, 0))
    draw.rectangle((size // 6, size * 2 // 3, size // 3, size - size // 8), fill=(200, 30, 30))
    return image


def write_oversized_png(path: Path, width: int = 60000, height: int = 60000) -> None:
    """PNG whose header declares dimensions beyond Pillow's decompression-bomb limit."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        body = kind + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body))

    header = struct.pack(">IIBBBBB", width, height, 8, 0, 0, 0, 0)
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b""))
        + chunk(b"IEND", b"")
    )


@pytest.fixture
def random_grid_8() -> list[list[int]]:
    """8x8 pseudo-random grid."""
    return make_grid(8, 8, seed=42)


@pytest.fixture
def random_grid_32() -> list[list[int]]:
    """32x32 pseudo-random grid."""
    return make_grid(32, 32, seed=7)


@pytest.fixture
def sample_image() -> Image.Image:
    """In-memory RGB sample image."""
    return draw_sample_image()


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Directory of near-duplicates plus a negative, a corrupt file and a text file."""
    original = draw_sample_image()
    original.save(tmp_path / "original.png")
    original.save(tmp_path / "copy.jpg", quality=95)

    nested = tmp_path / "nested"
    nested.mkdir()
    original.resize((128, 128)).save(nested / "smaller.PNG")

    ImageOps.invert(original).save(tmp_path / "negative.png")
    (tmp_path / "broken.png").write_bytes(b"definitely not a png")

    (tmp_path / "notes.txt").write_text("not an image")
    return tmp_path


@pytest.fixture
def grid_factory() -> Callable[..., list[list[int]]]:
    """Build deterministic pseudo-random grids: grid_factory(width, height, seed=0)."""
    return make_grid


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Drop logging configuration made by a test (e.g. CLI runs bound to a closed stream)."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def oversized_png_writer() -> Callable[..., None]:
    """Write a decompression-bomb PNG header: oversized_png_writer(path)."""
    return write_oversized_png
