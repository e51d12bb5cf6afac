"""Batch comparison and grouping of image hashes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from image_hash.models.image_hash import ImageHash


def batch_compare_similarity(target: ImageHash, hashes: Sequence[ImageHash]) -> list[float]:
    """Similarity of target to each hash, in input order.

    Any algorithm mismatch raises before a result is returned.
    """
    return [target.similarity(h) for h in hashes]


def batch_compare_distance(target: ImageHash, hashes: Sequence[ImageHash]) -> list[int]:
    """Hamming distance of target to each hash, in input order."""
    return [target.distance(h) for h in hashes]


def group_similar_hashes(
    entries: Sequence[tuple[str, ImageHash]],
    distance_threshold: int,
    on_compare: Callable[[int, int], None] | None = None,
) -> list[list[tuple[str, ImageHash]]]:
    """Greedily group entries whose hashes lie within distance_threshold.

    Walks entries in order. Each entry not yet grouped seeds a new group and
    pulls in every other ungrouped entry whose distance to the seed is
    strictly below the threshold. Singleton groups are dropped.

    on_compare, if given, is called as (current, total) every 10 seeds.
    """
    groups: list[list[tuple[str, ImageHash]]] = []
    grouped: set[str] = set()
    total = len(entries)

    for position, (key, seed) in enumerate(entries, start=1):
        if on_compare is not None and position % 10 == 0:
            on_compare(position, total)

        if key in grouped:
            continue

        group = [(key, seed)]
        grouped.add(key)

        for other_key, other in entries:
            if other_key == key or other_key in grouped:
                continue
            if seed.distance(other) < distance_threshold:
                group.append((other_key, other))
                grouped.add(other_key)

        if len(group) > 1:
            groups.append(group)

    return groups
