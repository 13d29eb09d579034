"""Main Textual application with screen management and shared state."""

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar

from typing_extensions import override

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Footer, Header

import structlog

from foundry.models import AppConfig, Catalog
from foundry.services.config import ConfigurationService


log = structlog.stdlib.get_logger()


@dataclass(frozen=True)
class AppState:
    """State shared between screens.

    The catalog is loaded once before the app starts and never changes.
    """

    catalog: Catalog = field(default_factory=Catalog.empty)
    current_config: AppConfig | None = None
    review_device_filter: str | None = None


class FoundryApp(App[None]):
    """Root Textual application for browsing and comparing handhelds."""

    CSS: ClassVar[str] = """
    Screen {
        background: $surface;
    }

    .title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    .section-title {
        text-style: bold;
        color: $secondary;
        margin-top: 1;
    }

    .toolbar {
        height: auto;
    }

    .toolbar Input, .toolbar Select {
        width: 1fr;
        margin-right: 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True, priority=True),
        Binding("escape", "go_back", "Back", show=True),
        Binding("?", "show_help", "Help", show=True),
    ]

    _config_service: ConfigurationService | None
    _navigation_stack: list[str]
    _app_context: Any  # ApplicationContext from foundry.main (avoid circular import)

    def __init__(
        self,
        catalog: Catalog | None = None,
        config_service: ConfigurationService | None = None,
    ) -> None:
        """Initialize the application.

        Args:
            catalog: Device catalog to browse (empty when omitted)
            config_service: Configuration service for loading/saving settings
        """
        super().__init__()
        self.title = "Foundry Handhelds"  # type: ignore[assignment]
        self.sub_title = "Handheld gaming PC catalog"  # type: ignore[assignment]
        self._config_service = config_service
        self._navigation_stack = []
        self._app_context = None
        self.app_state = AppState(catalog=catalog or Catalog.empty())

        log.info("FoundryApp initialized", devices=len(self.app_state.catalog))

    @property
    def app_context(self) -> Any:
        return self._app_context

    def set_app_context(self, context: Any) -> None:
        self._app_context = context

    @property
    def config_service(self) -> ConfigurationService | None:
        return self._config_service

    @property
    def catalog(self) -> Catalog:
        return self.app_state.catalog

    @property
    def config(self) -> AppConfig:
        """Current configuration, defaults when none was loaded."""
        return self.app_state.current_config or AppConfig()

    @property
    def navigation_stack(self) -> list[str]:
        """Get a copy of the current navigation stack."""
        return self._navigation_stack.copy()

    @override
    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    async def on_mount(self) -> None:
        """Load configuration and show the main menu."""
        if self._config_service:
            try:
                config = self._config_service.load_config()
                self.app_state = replace(self.app_state, current_config=config)
                log.info("Configuration loaded into app state")
            except Exception as e:
                log.error("Failed to load configuration", error=str(e))

        await self.push_screen_with_tracking("main_menu")

    async def push_screen_with_tracking(self, screen_name: str) -> None:
        """Push a screen by name and track it in the navigation stack."""
        from foundry.ui.screens import get_screen_by_name

        screen = get_screen_by_name(screen_name)
        if screen:
            self._navigation_stack.append(screen_name)
            await self.push_screen(screen)
            log.info("Screen pushed", screen=screen_name, stack_depth=len(self._navigation_stack))
        else:
            log.warning("Unknown screen requested", screen=screen_name)

    async def action_go_back(self) -> None:
        """Navigate back to the previous screen."""
        if len(self._navigation_stack) > 1:
            current = self._navigation_stack.pop()
            log.info("Navigating back", from_screen=current, stack_depth=len(self._navigation_stack))
            _ = self.pop_screen()
        else:
            log.debug("Already at root screen, cannot go back")

    async def action_show_help(self) -> None:
        self.notify("Press 'q' to quit, 'escape' to go back, 'enter' to select a row")

    def update_config(self, config: AppConfig) -> None:
        """Replace the configuration held in app state."""
        self.app_state = replace(self.app_state, current_config=config)
        log.info("Configuration updated in app state")

    def set_review_device_filter(self, device_id: str | None) -> None:
        """Restrict the reviews screen to one device, or clear the restriction."""
        self.app_state = replace(self.app_state, review_device_filter=device_id)
        log.info("Review filter changed", device_id=device_id)

    async def open_reviews_for_device(self, device_id: str) -> None:
        """Show the reviews screen filtered to a single device."""
        self.set_review_device_filter(device_id)
        await self.push_screen_with_tracking("reviews")
