"""Logging configuration for the Foundry Handhelds application."""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

APP_LOG_NAME = "foundry.log"
ERROR_LOG_NAME = "error.log"


class LoggingService:
    """Configures structlog on top of the standard logging module.

    Development console output is rendered for humans; production output and
    log files are JSON lines. In TUI mode nothing is written to stdout since
    it would corrupt the terminal UI.
    """

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
        tui_mode: bool = False,
    ) -> None:
        """Initialize the logging service.

        Args:
            log_level: The minimum log level to capture
            log_dir: Directory for log files (None for console only)
            tui_mode: If True, disable console logging
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.tui_mode = tui_mode
        self.environment = os.getenv("ENVIRONMENT", "development")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)

    def configure(self) -> None:
        """Configure stdlib handlers, then structlog processors."""
        self._configure_stdlib_logging()

        structlog.configure(
            processors=self._get_processors(),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _configure_stdlib_logging(self) -> None:
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(self.numeric_level)

        if not self.tui_mode:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.numeric_level)
            if self.is_development:
                console_handler.setFormatter(logging.Formatter(
                    fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
                    datefmt="%H:%M:%S",
                ))
            else:
                console_handler.setFormatter(logging.Formatter("%(message)s"))
            root_logger.addHandler(console_handler)

        if self.log_dir:
            self._setup_file_logging(root_logger)

    def _setup_file_logging(self, root_logger: logging.Logger) -> None:
        """Add rotating application and error log files."""
        if not self.log_dir:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        json_formatter = logging.Formatter("%(message)s")

        app_handler = logging.handlers.RotatingFileHandler(
            filename=self.log_dir / APP_LOG_NAME,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        app_handler.setLevel(self.numeric_level)
        app_handler.setFormatter(json_formatter)
        root_logger.addHandler(app_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            filename=self.log_dir / ERROR_LOG_NAME,
            maxBytes=1024 * 1024,  # 1MB
            backupCount=2,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(json_formatter)
        root_logger.addHandler(error_handler)

    def _get_processors(self) -> list[Any]:
        """Shared processors followed by the renderer for this environment."""
        processors: list[Any] = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        # Files always get JSON, so only a console-only dev setup is pretty-printed
        if self.is_development and not self.log_dir:
            processors.append(structlog.dev.ConsoleRenderer(colors=True))
        else:
            processors.append(structlog.processors.JSONRenderer())
        return processors

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        """Get a configured logger instance."""
        return structlog.stdlib.get_logger(name)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    environment: str | None = None,
    tui_mode: bool = False,
) -> LoggingService:
    """Set up application logging.

    Args:
        log_level: Minimum log level to capture
        log_dir: Directory for log files (None for console only)
        environment: Environment name (development/production)
        tui_mode: If True, disable console logging

    Returns:
        Configured LoggingService instance
    """
    if environment:
        os.environ["ENVIRONMENT"] = environment

    service = LoggingService(log_level=log_level, log_dir=log_dir, tui_mode=tui_mode)
    service.configure()
    return service
