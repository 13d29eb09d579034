"""Main entry point for the Foundry Handhelds application.

This module provides the application entry point with:
- Command-line argument parsing
- Catalog loading and service wiring
- Graceful shutdown handling
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path

import structlog

from foundry import __version__
from foundry.models import AppConfig, Catalog
from foundry.services.catalog_loader import fetch_catalog, load_bundled_catalog, load_catalog_file
from foundry.services.config import VALID_LOG_LEVELS, ConfigurationService
from foundry.services.errors import AppError, get_error_service, handle_error
from foundry.services.http_client import HttpClientService
from foundry.services.logging import setup_logging


log = structlog.stdlib.get_logger()


class ApplicationContext:
    """Container for application services and the loaded catalog."""

    def __init__(
        self,
        config_path: Path | None = None,
        catalog_path: Path | None = None,
        catalog_url: str | None = None,
    ) -> None:
        """Initialize the application context.

        Args:
            config_path: Path to configuration file
            catalog_path: Catalog file overriding the configured one
            catalog_url: Catalog URL overriding the configured one
        """
        self._config_path: Path | None = config_path
        self._catalog_path: Path | None = catalog_path
        self._catalog_url: str | None = catalog_url

        self._config_service: ConfigurationService | None = None
        self._http_client: HttpClientService | None = None
        self._config: AppConfig | None = None
        self._catalog: Catalog | None = None

        self._shutdown_requested: bool = False

    @property
    def config_service(self) -> ConfigurationService:
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self._config = self.config_service.load_config()
        return self._config

    @property
    def http_client(self) -> HttpClientService:
        if self._http_client is None:
            self._http_client = HttpClientService(timeout=self.config.request_timeout)
        return self._http_client

    @property
    def catalog(self) -> Catalog:
        """The loaded catalog; empty until load_catalog() has run."""
        return self._catalog or Catalog.empty()

    def catalog_source(self) -> tuple[str, str | Path | None]:
        """Where the catalog comes from: ("url", url), ("file", path) or ("bundled", None).

        Command-line options win over the configuration, and a URL wins over
        a file.
        """
        url = self._catalog_url or (None if self._catalog_path else self.config.catalog_url)
        if url:
            return "url", url
        path = self._catalog_path or self.config.catalog_path
        if path:
            return "file", path
        return "bundled", None

    async def load_catalog(self) -> Catalog:
        """Load the catalog from its configured source.

        A source that fails to load is reported through the error service and
        the bundled dataset is used instead.
        """
        kind, location = self.catalog_source()
        try:
            if kind == "url":
                catalog = await fetch_catalog(str(location), self.http_client)
            elif kind == "file":
                catalog = load_catalog_file(Path(location).expanduser())
            else:
                catalog = load_bundled_catalog()
        except Exception as e:
            if kind == "bundled":
                raise
            user_error = handle_error(
                e, "load catalog", component="main", context={"source": kind, "location": str(location)}
            )
            print(get_error_service().create_user_message(user_error), file=sys.stderr)
            log.warning("Falling back to bundled catalog", source=kind, location=str(location))
            catalog = load_bundled_catalog()

        self._catalog = catalog
        return catalog

    def request_shutdown(self) -> None:
        self._shutdown_requested = True
        log.info("Shutdown requested")

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_requested

    async def cleanup(self) -> None:
        """Close open connections."""
        log.info("Cleaning up application resources")
        if self._http_client is not None:
            await self._http_client.close()
        log.info("Application cleanup complete")


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(
        self,
        config: Path | None,
        log_level: str | None,
        log_dir: Path | None,
        catalog: Path | None,
        catalog_url: str | None,
        no_tui: bool,
    ) -> None:
        self.config: Path | None = config
        self.log_level: str | None = log_level
        self.log_dir: Path | None = log_dir
        self.catalog: Path | None = catalog
        self.catalog_url: str | None = catalog_url
        self.no_tui: bool = no_tui


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="foundry-handhelds",
        description="Browse, filter and compare handheld gaming PCs in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  foundry-handhelds                           Start the TUI application
  foundry-handhelds --no-tui                  Print a device summary
  foundry-handhelds --catalog ./devices.json  Use a local catalog file
        """,
    )

    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/foundry-handhelds/config.json)",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=VALID_LOG_LEVELS,
        default=None,
        help="Set the logging level (default: from configuration, INFO)",
    )
    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: ./logs in TUI mode)",
    )
    _ = parser.add_argument("--catalog", type=Path, default=None, help="Load the catalog from a JSON file")
    _ = parser.add_argument("--catalog-url", default=None, help="Fetch the catalog JSON from a URL")
    _ = parser.add_argument("--no-tui", action="store_true", help="Print a device summary and exit")
    return parser


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    ns = build_parser().parse_args(argv)
    return ParsedArgs(
        config=ns.config,
        log_level=ns.log_level,
        log_dir=ns.log_dir,
        catalog=ns.catalog,
        catalog_url=ns.catalog_url,
        no_tui=bool(ns.no_tui),
    )


def setup_signal_handlers(context: ApplicationContext) -> None:
    def signal_handler(signum: int, frame: object) -> None:
        _ = frame
        log.info("Received signal", signal=signal.Signals(signum).name)
        context.request_shutdown()

    _ = signal.signal(signal.SIGTERM, signal_handler)
    log.debug("Signal handlers registered")


def format_summary(catalog: Catalog) -> str:
    """Plain-text overview of the catalog, one device per line."""
    lines = [f"Foundry Handhelds {__version__}: {len(catalog)} devices"]
    for device in catalog:
        specs = device.specs
        battery = f"{specs.battery_wh:g} Wh" if specs.battery_wh is not None else "n/a"
        price = f"${specs.price:g}" if specs.price is not None else "n/a"
        lines.append(f"  {specs.name:<24} {specs.soc:<22} {battery:>8} {price:>8}")
    return "\n".join(lines)


async def run_summary(context: ApplicationContext) -> int:
    try:
        catalog = await context.load_catalog()
        print(format_summary(catalog))
        return 0
    finally:
        await context.cleanup()


async def run_tui(context: ApplicationContext) -> int:
    """Load the catalog and run the TUI until it exits.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    from foundry.ui.app import FoundryApp

    try:
        catalog = await context.load_catalog()
        log.info("Starting TUI application", devices=len(catalog))

        app = FoundryApp(catalog=catalog, config_service=context.config_service)
        app.set_app_context(context)
        await app.run_async()

        log.info("TUI application exited normally")
        return 0
    except Exception as e:
        log.error("TUI application error", error=str(e), exc_info=True)
        return 1
    finally:
        await context.cleanup()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)

    context = ApplicationContext(
        config_path=args.config,
        catalog_path=args.catalog,
        catalog_url=args.catalog_url,
    )

    log_dir = args.log_dir
    if log_dir is None and not args.no_tui:
        log_dir = Path("logs")

    _ = setup_logging(
        log_level=args.log_level or context.config.log_level,
        log_dir=log_dir,
        tui_mode=not args.no_tui,
    )

    log.info(
        "Starting Foundry Handhelds",
        version=__version__,
        config_path=str(context.config_service.config_path),
        catalog_source=context.catalog_source()[0],
    )

    setup_signal_handlers(context)

    try:
        if args.no_tui:
            exit_code = asyncio.run(run_summary(context))
        else:
            exit_code = asyncio.run(run_tui(context))

    except KeyboardInterrupt:
        log.info("Application interrupted by user")
        exit_code = 130

    except AppError as e:
        handle_error(e, "start application", component="main")
        print(f"Error: {e.message}", file=sys.stderr)
        exit_code = 1

    except Exception as e:
        log.error("Unhandled exception", error=str(e), exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        exit_code = 1

    log.info("Application exiting", exit_code=exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
