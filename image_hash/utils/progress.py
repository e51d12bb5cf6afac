"""Counters for a batch of image files being hashed."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from image_hash.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ProgressTracker:
    """Count hashed and failed files during a batch run.

    total may be left at 0 and filled in once the file list is known.
    failures maps each unreadable path to its error message.
    """

    total: int = 0
    hashed: int = 0
    failures: dict[str, str] = field(default_factory=dict)
    start_time: float = field(default_factory=time.monotonic)

    @property
    def failed(self) -> int:
        """Number of files that could not be hashed."""
        return len(self.failures)

    @property
    def processed(self) -> int:
        """Files finished so far, hashed or failed."""
        return self.hashed + self.failed

    def record_success(self) -> None:
        """Count one hashed file."""
        self.hashed += 1

    def record_failure(self, path: str, error: str) -> None:
        """Remember why path could not be hashed."""
        self.failures[path] = error

    @property
    def elapsed_seconds(self) -> float:
        """Seconds since the tracker was created."""
        return time.monotonic() - self.start_time

    @property
    def progress_percentage(self) -> float:
        """Percentage of files processed so far."""
        if self.total == 0:
            return 100.0
        return (self.processed / self.total) * 100.0

    def log_progress(self, every_n: int = 10) -> None:
        """Log a hashing_progress event every N files and once at the end."""
        if self.processed % every_n and self.processed != self.total:
            return
        logger.info(
            "hashing_progress",
            processed=self.processed,
            total=self.total,
            hashed=self.hashed,
            failed=self.failed,
            percentage=f"{self.progress_percentage:.1f}%",
            elapsed=f"{self.elapsed_seconds:.1f}s",
        )

    def summary(self) -> dict[str, int | float]:
        """Counts and duration for the run summary; failures are kept separately."""
        return {
            "files": self.total,
            "hashed": self.hashed,
            "failed": self.failed,
            "duration_seconds": round(self.elapsed_seconds, 2),
        }
