"""CLI command implementations for image hashing."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from image_hash.core.errors import FormatError, ImageHashError
from image_hash.models.config import Settings
from image_hash.models.image_hash import HashAlgorithm, HashDirection, ImageHash
from image_hash.utils.logger import configure_logging

if TYPE_CHECKING:
    from image_hash.models.progress import FinderProgress

_ALGORITHM_CHOICE = click.Choice([a.value for a in HashAlgorithm])
_DIRECTION_CHOICE = click.Choice([d.value for d in HashDirection])


def _get_settings() -> Settings:
    """Load settings from the environment and .env file."""
    return Settings()


def _resolve_algorithm(algorithm: str | None, settings: Settings) -> HashAlgorithm:
    return HashAlgorithm(algorithm) if algorithm else settings.default_algorithm


def _resolve_direction(direction: str | None, settings: Settings) -> HashDirection:
    return HashDirection(direction) if direction else settings.default_direction


def _print_summary(title: str, stats: dict[str, Any]) -> None:
    """Print a formatted summary of a run."""
    click.echo(f"\n[SUCCESS] {title}")
    for key, value in stats.items():
        click.echo(f"  {key}: {value}")


@click.command(name="hash")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--algorithm", type=_ALGORITHM_CHOICE, default=None, help="Hash algorithm")
@click.option("--size", type=int, default=None, help="Grid edge length (algorithm default)")
@click.option("--direction", type=_DIRECTION_CHOICE, default=None, help="Difference hash direction")
def hash_images(
    paths: tuple[str, ...],
    algorithm: str | None,
    size: int | None,
    direction: str | None,
) -> None:
    """Print the hash of each image as '<path>\\t<algorithm>:<hex>'."""
    settings = _get_settings()
    configure_logging(settings.log_level)

    from image_hash.services.hasher import hash_file

    hash_algorithm = _resolve_algorithm(algorithm, settings)
    hash_direction = _resolve_direction(direction, settings)
    hash_size = size if size is not None else settings.hash_size

    for path in paths:
        try:
            image_hash = hash_file(path, hash_algorithm, hash_size, hash_direction)
        except ImageHashError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"{path}\t{image_hash}")


@click.command()
@click.argument("first")
@click.argument("second")
@click.option("--algorithm", type=_ALGORITHM_CHOICE, default=None, help="Algorithm for image files")
@click.option("--size", type=int, default=None, help="Grid edge length (algorithm default)")
@click.option("--threshold", default=0.9, type=float, help="Min similarity 0.0-1.0")
def compare(
    first: str,
    second: str,
    algorithm: str | None,
    size: int | None,
    threshold: float,
) -> None:
    """Compare two images or two 'algorithm:hex' hash strings."""
    settings = _get_settings()
    configure_logging(settings.log_level)

    from image_hash.services.hasher import hash_file

    parsed = {arg: _parse_hash_argument(arg) for arg in (first, second)}
    known = [h for h in parsed.values() if h is not None]
    if algorithm:
        hash_algorithm = HashAlgorithm(algorithm)
    elif known:
        hash_algorithm = known[0].algorithm
    else:
        hash_algorithm = settings.default_algorithm
    hash_size = size if size is not None else settings.hash_size

    try:
        hashes = [
            parsed[arg]
            or hash_file(arg, hash_algorithm, hash_size, settings.default_direction)
            for arg in (first, second)
        ]
        distance = hashes[0].distance(hashes[1])
        similarity = hashes[0].similarity(hashes[1])
    except ImageHashError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"{first}: {hashes[0]}")
    click.echo(f"{second}: {hashes[1]}")
    click.echo(f"distance: {distance}")
    click.echo(f"similarity: {similarity:.4f}")
    click.echo(f"similar: {similarity >= threshold}")


def _parse_hash_argument(arg: str) -> ImageHash | None:
    """Treat arg as a hash string unless it names an existing file."""
    if Path(arg).is_file():
        return None
    try:
        return ImageHash.from_string(arg)
    except FormatError as exc:
        msg = f"{arg!r} is neither an image file nor a hash string: {exc}"
        raise click.BadParameter(msg) from exc


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--threshold", default=None, type=click.IntRange(0, 64), help="Max Hamming distance 0-64"
)
@click.option("--algorithm", type=_ALGORITHM_CHOICE, default=None, help="Hash algorithm")
@click.option("--size", type=int, default=None, help="Grid edge length (algorithm default)")
@click.option("--ext", "extensions", multiple=True, help="File extension to include (repeatable)")
@click.option("--max-workers", default=None, type=int, help="Parallel hashing threads")
@click.option("--progress", is_flag=True, help="Print progress updates to stderr")
@click.option(
    "--output-format",
    default="summary",
    type=click.Choice(["summary", "json"]),
    help="Output format",
)
def find_similar(
    directory: str,
    threshold: int | None,
    algorithm: str | None,
    size: int | None,
    extensions: tuple[str, ...],
    max_workers: int | None,
    progress: bool,
    output_format: str,
) -> None:
    """Find groups of similar images under DIRECTORY."""
    settings = _get_settings()
    configure_logging(settings.log_level)

    from image_hash.services.finder import find_similar_images
    from image_hash.utils.progress import ProgressTracker

    def _on_progress(event: FinderProgress) -> None:
        click.echo(f"[PROGRESS] {event}", err=True)

    tracker = ProgressTracker()
    try:
        groups = find_similar_images(
            directory,
            extensions=[e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions]
            or settings.extensions,
            distance_threshold=threshold if threshold is not None else settings.distance_threshold,
            algorithm=_resolve_algorithm(algorithm, settings),
            size=size if size is not None else settings.hash_size,
            direction=settings.default_direction,
            max_workers=max_workers or settings.max_workers,
            on_progress=_on_progress if progress else None,
            tracker=tracker,
        )
    except ImageHashError as exc:
        raise click.ClickException(str(exc)) from exc

    if output_format == "json":
        click.echo(json.dumps([group.model_dump() for group in groups], indent=2))
        return

    if not groups:
        click.echo("[INFO] No similar images found.")
    else:
        click.echo(f"[INFO] Found {len(groups)} groups of similar images:\n")
        for number, group in enumerate(groups, start=1):
            click.echo(f"  Group {number} ({len(group)} images):")
            for member in group.members:
                click.echo(f"    {member.image_hash}  {member.path}")

    _print_summary(
        "Similar image search complete",
        {
            "groups": len(groups),
            "images_in_groups": sum(len(g) for g in groups),
            **tracker.summary(),
        },
    )
    for path, error in tracker.failures.items():
        click.echo(f"  [ERROR] {path}: {error}")
