"""Shared screen behaviour: catalog access, navigation and user notices."""

from typing import TYPE_CHECKING, Any, ClassVar, Literal

from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Static

import structlog

from foundry.models import Catalog
from foundry.services.errors import ErrorSeverity, UserFriendlyError, get_error_service, handle_error

if TYPE_CHECKING:
    from foundry.ui.app import FoundryApp

log = structlog.stdlib.get_logger()

NoticeLevel = Literal["information", "warning", "error"]

_LOG_METHODS = {
    "information": "info",
    "warning": "warning",
    "error": "error",
}


class BaseScreen(Screen[None]):
    """Base class for every page of the dashboard.

    Subclasses set SCREEN_TITLE and SCREEN_NAME (the registry key) and
    override compose(). Textual calls the mount and unmount handlers of
    every class in the MRO, so subclass handlers do not call super().
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
    ]

    SCREEN_TITLE: ClassVar[str] = "Screen"
    SCREEN_NAME: ClassVar[str] = "base"

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name=name or self.SCREEN_NAME)

    @property
    def foundry_app(self) -> "FoundryApp":
        """The running FoundryApp; RuntimeError if mounted anywhere else."""
        from foundry.ui.app import FoundryApp

        if not isinstance(self.app, FoundryApp):
            raise RuntimeError("Screen is not attached to a FoundryApp")
        return self.app

    @property
    def catalog(self) -> Catalog:
        return self.foundry_app.catalog

    async def on_mount(self) -> None:
        log.info("Screen mounted", screen=self.SCREEN_NAME, devices=len(self.catalog))

    async def on_unmount(self) -> None:
        log.debug("Screen unmounted", screen=self.SCREEN_NAME)

    async def action_go_back(self) -> None:
        await self.foundry_app.action_go_back()

    def create_title_widget(self, title: str | None = None) -> Static:
        return Static(title or self.SCREEN_TITLE, classes="title")

    def report(self, message: str, level: NoticeLevel = "information") -> None:
        """Show a toast and mirror it to the log."""
        self.notify(message, severity=level)
        getattr(log, _LOG_METHODS[level])("User notification", message=message, screen=self.SCREEN_NAME)

    def notify_error(self, message: str) -> None:
        self.report(message, "error")

    def notify_success(self, message: str) -> None:
        self.report(message)

    def notify_warning(self, message: str) -> None:
        self.report(message, "warning")

    def handle_exception(
        self,
        error: Exception,
        operation: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Record the error with the error service and tell the user.

        Warnings (bad input) show as warnings; everything else as errors.
        The suggestions stay in the log since toasts are short.
        """
        user_error = handle_error(error, operation, component=self.SCREEN_NAME, context=context)
        message = get_error_service().create_user_message(user_error, include_suggestions=False)
        self.report(message, "warning" if user_error.severity is ErrorSeverity.WARNING else "error")
        return user_error


def as_select_options(pairs: list[tuple[str, str]]) -> list[tuple[str, str]]:
    """Turn engine (value, label) pairs into Textual's (prompt, value) options."""
    return [(label, value) for value, label in pairs]
