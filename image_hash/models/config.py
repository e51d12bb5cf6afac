"""Application configuration model using pydantic-settings."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from image_hash.models.image_hash import HASH_BITS, HashAlgorithm, HashDirection


class Settings(BaseSettings):
    """Configuration loaded from IMAGE_HASH_* environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="IMAGE_HASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"
    default_algorithm: HashAlgorithm = HashAlgorithm.PERCEPTUAL
    default_direction: HashDirection = HashDirection.HORIZONTAL
    hash_size: int | None = None
    distance_threshold: int = 20
    extensions: list[str] = [".jpg", ".jpeg", ".png"]
    max_workers: int = 4

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Log level must be a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            msg = f"log_level must be one of {', '.join(sorted(valid_levels))}"
            raise ValueError(msg)
        return upper_value

    @field_validator("hash_size")
    @classmethod
    def validate_hash_size(cls, value: int | None) -> int | None:
        """Hash size override must be positive when set."""
        if value is not None and value < 1:
            msg = "hash_size must be a positive integer"
            raise ValueError(msg)
        return value

    @field_validator("distance_threshold")
    @classmethod
    def validate_distance_threshold(cls, value: int) -> int:
        """Distance threshold must lie within the hash width."""
        if value < 0 or value > HASH_BITS:
            msg = f"distance_threshold must be between 0 and {HASH_BITS}"
            raise ValueError(msg)
        return value

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, value: list[str]) -> list[str]:
        """Lowercase extensions and make sure each starts with a dot."""
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        if not normalized:
            msg = "extensions must contain at least one entry"
            raise ValueError(msg)
        return normalized

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, value: int) -> int:
        """Worker count must be between 1 and 64."""
        if value < 1 or value > 64:
            msg = "max_workers must be between 1 and 64"
            raise ValueError(msg)
        return value
