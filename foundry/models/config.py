"""Configuration data models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    """Application configuration settings."""
    log_level: str = "INFO"
    catalog_path: Path | None = None  # None = bundled dataset
    catalog_url: str | None = None  # Takes precedence over catalog_path
    default_min_battery: float = 40.0  # Wh
    default_sort: str = "name"
    request_timeout: float = 10.0  # seconds
