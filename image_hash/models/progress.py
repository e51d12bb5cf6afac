"""Progress events emitted while searching for similar images."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ProgressKind(StrEnum):
    """Stage of a similar-image search."""

    SCAN_DIR = "scan_dir"
    FOUND_IMAGES = "found_images"
    PROCESSING_IMAGE = "processing_image"
    COMPARE = "compare"
    FOUND_GROUPS = "found_groups"
    ERROR = "error"


class FinderProgress(BaseModel):
    """A single progress update; unused fields stay None."""

    model_config = ConfigDict(frozen=True)

    kind: ProgressKind
    current: int | None = None
    total: int | None = None
    count: int | None = None
    path: str | None = None
    message: str | None = None

    def __str__(self) -> str:
        if self.kind == ProgressKind.SCAN_DIR:
            return "Scanning directory..."
        if self.kind == ProgressKind.FOUND_IMAGES:
            return f"Found {self.count} image files"
        if self.kind == ProgressKind.PROCESSING_IMAGE:
            return f"Processing image {self.current}/{self.total}: {self.path}"
        if self.kind == ProgressKind.COMPARE:
            return f"Comparing image {self.current}/{self.total}"
        if self.kind == ProgressKind.FOUND_GROUPS:
            return f"Found {self.count} groups of similar images"
        return f"Error of <{self.path}>: {self.message}"
