"""Pure hashing engine: transforms, algorithms and comparisons (no I/O)."""
