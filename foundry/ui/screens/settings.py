"""Settings screen for editing and saving the application configuration."""

from pathlib import Path
from typing import ClassVar

from typing_extensions import override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Input, Label, Select, Static

import structlog

from foundry.models import AppConfig, SortKey
from foundry.services.config import VALID_LOG_LEVELS, ConfigurationService

from .base import BaseScreen

log = structlog.stdlib.get_logger()


LOG_LEVELS: list[tuple[str, str]] = [(level, level) for level in VALID_LOG_LEVELS]
SORT_OPTIONS: list[tuple[str, str]] = [(key.label, key.value) for key in SortKey]


class SettingsScreen(BaseScreen):
    """Form for the catalog source, device page defaults and logging.

    Values are validated as they are typed; the configuration service does
    the final validation when saving.
    """

    SCREEN_TITLE: ClassVar[str] = "Settings"
    SCREEN_NAME: ClassVar[str] = "settings"

    CSS: ClassVar[str] = """
    SettingsScreen {
        align: center middle;
    }

    #settings-container {
        width: 80;
        height: auto;
        max-height: 90%;
        padding: 1 2;
        border: solid $primary;
        background: $surface;
    }

    .form-group {
        margin-bottom: 1;
        height: auto;
    }

    .form-hint {
        color: $text-muted;
        text-style: italic;
    }

    .validation-error {
        color: $error;
    }

    .validation-success {
        color: $success;
    }

    #button-row {
        margin-top: 1;
        height: auto;
        align: center middle;
    }

    #button-row Button {
        margin: 0 1;
    }

    #validation-status {
        text-align: center;
        height: 1;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("ctrl+s", "save_settings", "Save", show=True),
        Binding("ctrl+r", "reset_settings", "Reset", show=True),
    ]

    _original_config: AppConfig | None
    _has_changes: bool
    _validation_errors: dict[str, str]

    def __init__(self) -> None:
        super().__init__()
        self._original_config = None
        self._has_changes = False
        self._validation_errors = {}

    def _form_group(self, label: str, hint: str, widget: Input | Select[str]) -> Vertical:
        return Vertical(
            Label(label),
            widget,
            Static(hint, classes="form-hint"),
            classes="form-group",
        )

    @override
    def compose(self) -> ComposeResult:
        with Container(id="settings-container"):
            yield self.create_title_widget()

            with Vertical(id="settings-form"):
                yield self._form_group(
                    "Catalog URL:",
                    "Remote catalog JSON (http/https); overrides the catalog file",
                    Input(placeholder="https://example.com/catalog.json", id="input-catalog-url"),
                )
                yield self._form_group(
                    "Catalog File:",
                    "Local catalog JSON; leave empty for the bundled dataset",
                    Input(placeholder="~/handhelds.json", id="input-catalog-path"),
                )
                yield self._form_group(
                    "Minimum Battery (Wh):",
                    "Initial battery filter on the devices page (0-200)",
                    Input(placeholder="40", id="input-min-battery", type="number"),
                )
                yield self._form_group(
                    "Default Sort:",
                    "Initial ordering on the devices page",
                    Select(SORT_OPTIONS, id="select-sort", allow_blank=False, value=SortKey.NAME.value),
                )
                yield self._form_group(
                    "Request Timeout (seconds):",
                    "Timeout when fetching a remote catalog (0-120)",
                    Input(placeholder="10", id="input-timeout", type="number"),
                )
                yield self._form_group(
                    "Log Level:",
                    "Logging verbosity, applied on next start",
                    Select(LOG_LEVELS, id="select-log-level", allow_blank=False, value="INFO"),
                )

            yield Static("", id="validation-status")

            with Horizontal(id="button-row"):
                yield Button("Save", id="btn-save", variant="primary")
                yield Button("Reset", id="btn-reset", variant="default")
                yield Button("Cancel", id="btn-cancel", variant="error")

    @override
    async def on_mount(self) -> None:
        config = self.foundry_app.config
        if self.foundry_app.app_state.current_config is None:
            config = self._get_config_service().load_config()
        self._original_config = config
        self._populate_form(config)

    def _get_config_service(self) -> ConfigurationService:
        return self.foundry_app.config_service or ConfigurationService()

    def _populate_form(self, config: AppConfig) -> None:
        self.query_one("#input-catalog-url", Input).value = config.catalog_url or ""
        self.query_one("#input-catalog-path", Input).value = (
            str(config.catalog_path) if config.catalog_path else ""
        )
        self.query_one("#input-min-battery", Input).value = f"{config.default_min_battery:g}"
        self.query_one("#input-timeout", Input).value = f"{config.request_timeout:g}"
        self.query_one("#select-sort", Select).value = config.default_sort
        self.query_one("#select-log-level", Select).value = config.log_level

        self._has_changes = False
        self._update_validation_status()

    def _get_form_values(self) -> dict[str, str]:
        sort_value = self.query_one("#select-sort", Select).value
        log_value = self.query_one("#select-log-level", Select).value
        return {
            "catalog_url": self.query_one("#input-catalog-url", Input).value.strip(),
            "catalog_path": self.query_one("#input-catalog-path", Input).value.strip(),
            "default_min_battery": self.query_one("#input-min-battery", Input).value.strip(),
            "request_timeout": self.query_one("#input-timeout", Input).value.strip(),
            "default_sort": str(sort_value) if sort_value is not Select.BLANK else SortKey.NAME.value,
            "log_level": str(log_value) if log_value is not Select.BLANK else "INFO",
        }

    def _validate_form(self) -> tuple[bool, dict[str, str]]:
        """Check each field; returns (is_valid, errors by field)."""
        errors: dict[str, str] = {}
        values = self._get_form_values()

        url = values["catalog_url"]
        if url and not url.startswith(("http://", "https://")):
            errors["catalog_url"] = "Catalog URL must start with http:// or https://"

        for key, label, upper in (
            ("default_min_battery", "Minimum battery", 200.0),
            ("request_timeout", "Request timeout", 120.0),
        ):
            raw = values[key]
            if not raw:
                errors[key] = f"{label} is required"
                continue
            try:
                number = float(raw)
            except ValueError:
                errors[key] = f"{label} must be a number"
                continue
            if number < 0 or number > upper:
                errors[key] = f"{label} must be between 0 and {upper:g}"
            elif key == "request_timeout" and number == 0:
                errors[key] = "Request timeout must be positive"

        self._validation_errors = errors
        return len(errors) == 0, errors

    def _update_validation_status(self) -> None:
        status_widget = self.query_one("#validation-status", Static)
        is_valid, errors = self._validate_form()

        if is_valid:
            status_widget.update("✓ Valid - Press Save to apply changes" if self._has_changes else "")
            _ = status_widget.remove_class("validation-error")
            _ = status_widget.set_class(self._has_changes, "validation-success")
        else:
            error_msg = next(iter(errors.values()), "Invalid configuration")
            status_widget.update(f"✗ {error_msg}")
            _ = status_widget.add_class("validation-error")
            _ = status_widget.remove_class("validation-success")

    def _build_config_from_form(self) -> AppConfig | None:
        """Build an AppConfig from the form, or None if a field is invalid."""
        is_valid, _ = self._validate_form()
        if not is_valid:
            return None

        values = self._get_form_values()
        return AppConfig(
            log_level=values["log_level"],
            catalog_path=Path(values["catalog_path"]).expanduser() if values["catalog_path"] else None,
            catalog_url=values["catalog_url"] or None,
            default_min_battery=float(values["default_min_battery"]),
            default_sort=values["default_sort"],
            request_timeout=float(values["request_timeout"]),
        )

    async def on_input_changed(self, event: Input.Changed) -> None:
        self._has_changes = True
        self._update_validation_status()
        log.debug("Input changed", input_id=event.input.id, value=event.value)

    async def on_select_changed(self, event: Select.Changed) -> None:
        self._has_changes = True
        self._update_validation_status()
        log.debug("Select changed", select_id=str(event.select.id), value=str(event.value))

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            await self.action_save_settings()
        elif event.button.id == "btn-reset":
            await self.action_reset_settings()
        elif event.button.id == "btn-cancel":
            if self._has_changes:
                log.info("Discarding unsaved changes")
            await self.action_go_back()

    async def action_save_settings(self) -> None:
        config = self._build_config_from_form()
        if config is None:
            self.notify_error("Cannot save: Please fix validation errors")
            return

        try:
            self._get_config_service().save_config(config)
        except (OSError, ValueError) as e:
            self.handle_exception(e, "save settings")
            return

        self.foundry_app.update_config(config)
        self._original_config = config
        self._has_changes = False
        self._update_validation_status()
        self.notify_success("Settings saved")
        log.info("Settings saved", config=str(config))

    async def action_reset_settings(self) -> None:
        """Restore the form to the last saved configuration."""
        if self._original_config:
            self._populate_form(self._original_config)
            self.notify_success("Settings reset to last saved values")
            log.info("Settings reset")
