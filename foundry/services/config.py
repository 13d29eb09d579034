"""Configuration service for managing application settings."""

import json
from pathlib import Path
from typing import Any

import structlog

from ..models import AppConfig, SortKey
from .errors import ConfigurationError

log = structlog.stdlib.get_logger()

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "foundry-handhelds" / "config.json"


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Loads, validates and saves the JSON configuration file."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or DEFAULT_CONFIG_PATH
        log.info("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> AppConfig:
        """Load configuration from file, falling back to defaults."""
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return self.get_default_config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data: dict[str, Any] = json.load(f)

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return self.get_default_config()

            log.info("Configuration loaded successfully")
            return config

        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return self.get_default_config()

    def save_config(self, config: AppConfig) -> None:
        """Validate and save configuration to file.

        Raises:
            ConfigurationError: If the configuration is invalid
            OSError: If the file cannot be written
        """
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ConfigurationError(
                f"Invalid configuration: {', '.join(validation_result.errors)}", errors=validation_result.errors
            )

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(self._config_to_dict(config), f, indent=2, ensure_ascii=False)
            log.info("Configuration saved successfully")

        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

    def validate_config(self, config: AppConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        if config.catalog_path is not None and not isinstance(config.catalog_path, Path):
            errors.append("catalog_path must be a Path object")

        if config.catalog_url is not None:
            if not isinstance(config.catalog_url, str) or not config.catalog_url.startswith(("http://", "https://")):
                errors.append("catalog_url must be an http:// or https:// URL")

        if isinstance(config.default_min_battery, bool) or not isinstance(config.default_min_battery, (int, float)):
            errors.append("default_min_battery must be a number")
        elif config.default_min_battery < 0:
            errors.append("default_min_battery must be non-negative")
        elif config.default_min_battery > 200:
            errors.append("default_min_battery should not exceed 200 Wh")

        valid_sorts = [key.value for key in SortKey]
        if config.default_sort not in valid_sorts:
            errors.append(f"default_sort must be one of: {', '.join(valid_sorts)}")

        if isinstance(config.request_timeout, bool) or not isinstance(config.request_timeout, (int, float)) \
                or config.request_timeout <= 0:
            errors.append("request_timeout must be a positive number")
        elif config.request_timeout > 120:
            errors.append("request_timeout should not exceed 120 seconds")

        return ValidationResult(len(errors) == 0, errors)

    def get_default_config(self) -> AppConfig:
        """Get default configuration."""
        return AppConfig()

    def _config_to_dict(self, config: AppConfig) -> dict[str, Any]:
        """Convert AppConfig to dictionary for JSON serialization."""
        return {
            "log_level": config.log_level,
            "catalog_path": str(config.catalog_path) if config.catalog_path else None,
            "catalog_url": config.catalog_url,
            "default_min_battery": config.default_min_battery,
            "default_sort": config.default_sort,
            "request_timeout": config.request_timeout,
        }

    def _dict_to_config(self, data: dict[str, Any]) -> AppConfig:
        """Convert dictionary to AppConfig, tolerating missing keys."""
        defaults = AppConfig()

        catalog_path_raw = data.get("catalog_path")
        catalog_path = Path(str(catalog_path_raw)).expanduser() if catalog_path_raw else None

        catalog_url_raw = data.get("catalog_url")
        catalog_url = str(catalog_url_raw) if catalog_url_raw else None

        min_battery_raw = data.get("default_min_battery", defaults.default_min_battery)
        timeout_raw = data.get("request_timeout", defaults.request_timeout)

        return AppConfig(
            log_level=str(data.get("log_level", defaults.log_level)),
            catalog_path=catalog_path,
            catalog_url=catalog_url,
            default_min_battery=float(min_battery_raw)
            if isinstance(min_battery_raw, (int, float)) else defaults.default_min_battery,
            default_sort=str(data.get("default_sort", defaults.default_sort)),
            request_timeout=float(timeout_raw)
            if isinstance(timeout_raw, (int, float)) else defaults.request_timeout,
        )
