"""Find groups of visually similar images on disk."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from image_hash.core.comparison import group_similar_hashes
from image_hash.core.hashers import default_size, validate_parameters
from image_hash.models.image_hash import HashAlgorithm, HashDirection, parse_algorithm
from image_hash.models.progress import FinderProgress, ProgressKind
from image_hash.models.similar_group import GroupMember, SimilarImageGroup
from image_hash.services.hasher import hash_file
from image_hash.utils.progress import ProgressTracker

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from image_hash.models.image_hash import ImageHash

logger = structlog.get_logger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".jpg", ".jpeg", ".png")
DEFAULT_DISTANCE_THRESHOLD = 20


def list_image_files(
    directory: str | Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    recursive: bool = True,
) -> list[str]:
    """Sorted paths of files under directory whose suffix matches extensions.

    Matching is case-insensitive; an empty extension list matches every file.
    """
    root = Path(directory)
    if not root.is_dir():
        msg = f"Not a directory: {root}"
        raise FileNotFoundError(msg)

    wanted = tuple(ext.lower() for ext in extensions)
    candidates = root.rglob("*") if recursive else root.iterdir()
    return sorted(
        str(path)
        for path in candidates
        if path.is_file() and (not wanted or path.name.lower().endswith(wanted))
    )


def hash_files(
    paths: Sequence[str],
    algorithm: HashAlgorithm | str = HashAlgorithm.PERCEPTUAL,
    size: int | None = None,
    direction: HashDirection = HashDirection.HORIZONTAL,
    max_workers: int = 4,
    on_progress: Callable[[FinderProgress], None] | None = None,
    tracker: ProgressTracker | None = None,
) -> list[tuple[str, ImageHash]]:
    """Hash files in parallel, returning (path, hash) pairs in input order.

    Any file that fails is logged, reported as an ERROR progress event,
    recorded on tracker and left out of the result. Pass a tracker to read
    the run's counts afterwards.
    """
    algorithm = parse_algorithm(algorithm)
    if size is None:
        size = default_size(algorithm)
    direction = HashDirection(direction)
    validate_parameters(algorithm, size, direction)

    if tracker is None:
        tracker = ProgressTracker()
    tracker.total = len(paths)
    hashes: dict[str, ImageHash] = {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(hash_file, path, algorithm, size, direction): path for path in paths
        }

        for future in as_completed(futures):
            path = futures[future]
            _emit(
                on_progress,
                FinderProgress(
                    kind=ProgressKind.PROCESSING_IMAGE,
                    current=tracker.processed + 1,
                    total=len(paths),
                    path=path,
                ),
            )
            try:
                hashes[path] = future.result()
                tracker.record_success()
            except Exception as exc:
                logger.warning("image_hash_failed", path=path, error=str(exc))
                tracker.record_failure(path, str(exc))
                _emit(
                    on_progress,
                    FinderProgress(kind=ProgressKind.ERROR, path=path, message=str(exc)),
                )

            tracker.log_progress(every_n=10)

    return [(path, hashes[path]) for path in paths if path in hashes]


def find_similar_in_paths(
    paths: Sequence[str],
    distance_threshold: int = DEFAULT_DISTANCE_THRESHOLD,
    algorithm: HashAlgorithm | str = HashAlgorithm.PERCEPTUAL,
    size: int | None = None,
    direction: HashDirection = HashDirection.HORIZONTAL,
    max_workers: int = 4,
    on_progress: Callable[[FinderProgress], None] | None = None,
    tracker: ProgressTracker | None = None,
) -> list[SimilarImageGroup]:
    """Hash the given files and group those closer than distance_threshold."""
    _emit(on_progress, FinderProgress(kind=ProgressKind.FOUND_IMAGES, count=len(paths)))

    entries = hash_files(
        paths,
        algorithm=algorithm,
        size=size,
        direction=direction,
        max_workers=max_workers,
        on_progress=on_progress,
        tracker=tracker,
    )

    def _on_compare(current: int, total: int) -> None:
        _emit(
            on_progress,
            FinderProgress(kind=ProgressKind.COMPARE, current=current, total=total),
        )

    raw_groups = group_similar_hashes(entries, distance_threshold, on_compare=_on_compare)
    groups = [
        SimilarImageGroup(
            members=[GroupMember(path=path, image_hash=h) for path, h in raw_group],
        )
        for raw_group in raw_groups
    ]

    logger.info(
        "similar_groups_found",
        images=len(entries),
        groups=len(groups),
        threshold=distance_threshold,
    )
    _emit(on_progress, FinderProgress(kind=ProgressKind.FOUND_GROUPS, count=len(groups)))
    return groups


def find_similar_images(
    directory: str | Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    distance_threshold: int = DEFAULT_DISTANCE_THRESHOLD,
    algorithm: HashAlgorithm | str = HashAlgorithm.PERCEPTUAL,
    size: int | None = None,
    direction: HashDirection = HashDirection.HORIZONTAL,
    max_workers: int = 4,
    on_progress: Callable[[FinderProgress], None] | None = None,
    tracker: ProgressTracker | None = None,
) -> list[SimilarImageGroup]:
    """Scan directory recursively and group visually similar images.

    A directory that cannot be listed produces an ERROR event and no groups.
    """
    _emit(on_progress, FinderProgress(kind=ProgressKind.SCAN_DIR))
    try:
        paths = list_image_files(directory, extensions, recursive=True)
    except OSError as exc:
        logger.error("directory_scan_failed", directory=str(directory), error=str(exc))
        _emit(
            on_progress,
            FinderProgress(kind=ProgressKind.ERROR, path=str(directory), message=str(exc)),
        )
        return []

    return find_similar_in_paths(
        paths,
        distance_threshold=distance_threshold,
        algorithm=algorithm,
        size=size,
        direction=direction,
        max_workers=max_workers,
        on_progress=on_progress,
        tracker=tracker,
    )


def _emit(on_progress: Callable[[FinderProgress], None] | None, event: FinderProgress) -> None:
    if on_progress is not None:
        on_progress(event)
