"""Main menu screen for the TUI application."""

from typing import ClassVar

from typing_extensions import override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.widgets import Button, Static

import structlog

from .base import BaseScreen

log = structlog.stdlib.get_logger()


class MainMenuScreen(BaseScreen):
    """Main menu with one button per page of the dashboard.

    Number keys 1-6 jump straight to a page.
    """

    SCREEN_TITLE: ClassVar[str] = "Main Menu"
    SCREEN_NAME: ClassVar[str] = "main_menu"

    CSS: ClassVar[str] = """
    MainMenuScreen {
        align: center middle;
    }

    #menu-container {
        width: 60;
        height: auto;
        padding: 2 4;
        border: solid $primary;
        background: $surface;
    }

    #menu-title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    #menu-subtitle {
        text-align: center;
        color: $text-muted;
        margin-bottom: 2;
    }

    .menu-button {
        width: 100%;
        margin-bottom: 1;
    }
    """

    # (option id, button label, target screen)
    MENU_OPTIONS: ClassVar[list[tuple[str, str, str]]] = [
        ("devices", "1. Devices", "devices"),
        ("compare", "2. Compare", "compare"),
        ("processors", "3. Processors", "processors"),
        ("igpus", "4. Integrated GPUs", "igpus"),
        ("reviews", "5. Reviews", "reviews"),
        ("settings", "6. Settings", "settings"),
    ]

    BINDINGS: ClassVar[list[Binding]] = [
        Binding(str(i), f"navigate('{target}')", label, show=False)
        for i, (_, label, target) in enumerate(MENU_OPTIONS, start=1)
    ]

    @override
    def compose(self) -> ComposeResult:
        with Container(id="menu-container"):
            yield Static("Foundry Handhelds", id="menu-title")
            yield Static(self._subtitle(), id="menu-subtitle")

            with Vertical(id="menu-buttons"):
                for option_id, label, _ in self.MENU_OPTIONS:
                    yield Button(label, id=f"btn-{option_id}", classes="menu-button")

    def _subtitle(self) -> str:
        count = len(self.catalog)
        return f"{count} handheld{'s' if count != 1 else ''} in the catalog"

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if not button_id:
            return

        option = button_id.removeprefix("btn-")
        for opt_id, _, target in self.MENU_OPTIONS:
            if opt_id == option:
                log.info("Menu option selected", option=option, target=target)
                await self.action_navigate(target)
                return

        log.warning("Unknown menu option", button_id=button_id)

    async def action_navigate(self, screen_name: str) -> None:
        """Navigate to a screen by its registered name."""
        try:
            await self.foundry_app.push_screen_with_tracking(screen_name)
        except Exception as e:
            self.handle_exception(e, f"open {screen_name}", {"target": screen_name})

    @override
    async def action_go_back(self) -> None:
        """Back from the main menu quits the application."""
        log.info("Quit requested from main menu")
        self.foundry_app.exit()
