"""Pydantic data models for image hashing."""

from image_hash.models.config import Settings
from image_hash.models.image_hash import (
    HASH_BITS,
    HashAlgorithm,
    HashDirection,
    ImageHash,
    parse_algorithm,
)
from image_hash.models.progress import FinderProgress, ProgressKind
from image_hash.models.similar_group import GroupMember, SimilarImageGroup

__all__ = [
    "HASH_BITS",
    "FinderProgress",
    "GroupMember",
    "HashAlgorithm",
    "HashDirection",
    "ImageHash",
    "ProgressKind",
    "Settings",
    "SimilarImageGroup",
    "parse_algorithm",
]
