"""Tests for UI navigation, the screen registry and app state."""

import pytest
from hypothesis import given, settings, strategies as st
from textual.containers import VerticalScroll
from textual.pilot import Pilot
from textual.widgets import DataTable

from foundry.models import AppConfig, Catalog, ChartMode
from foundry.services.catalog_loader import load_bundled_catalog
from foundry.services.filtering import collect_reviews
from foundry.ui.app import AppState, FoundryApp
from foundry.ui.screens import (
    BaseScreen,
    CompareScreen,
    DevicesScreen,
    IGPUsScreen,
    MainMenuScreen,
    ProcessorsScreen,
    ReviewsScreen,
    get_registered_screens,
    get_screen_by_name,
    register_screen,
)
from foundry.ui.screens.base import as_select_options
from foundry.ui.screens.chart_base import ChartScreen
from foundry.ui.screens.groups import GroupScreen


menu_options_strategy = st.sampled_from([opt[0] for opt in MainMenuScreen.MENU_OPTIONS])


class TestMenuNavigation:
    """Tests for menu navigation consistency."""

    @given(menu_options_strategy)
    @settings(max_examples=20)
    def test_every_menu_option_targets_a_registered_screen(self, option: str) -> None:
        targets = {opt_id: target for opt_id, _, target in MainMenuScreen.MENU_OPTIONS}
        assert targets[option] in get_registered_screens()

    def test_menu_options_have_unique_ids_and_targets(self) -> None:
        option_ids = [opt[0] for opt in MainMenuScreen.MENU_OPTIONS]
        targets = [opt[2] for opt in MainMenuScreen.MENU_OPTIONS]
        assert len(option_ids) == len(set(option_ids))
        assert len(targets) == len(set(targets))

    def test_number_keys_bound_to_menu(self) -> None:
        keys = [binding.key for binding in MainMenuScreen.BINDINGS]
        assert keys == [str(i) for i in range(1, len(MainMenuScreen.MENU_OPTIONS) + 1)]


class TestScreenRegistry:
    """Tests for screen registry functionality."""

    @pytest.mark.parametrize(
        "name", ["main_menu", "devices", "compare", "processors", "igpus", "reviews", "settings"],
    )
    def test_screen_is_registered(self, name: str) -> None:
        screen = get_screen_by_name(name)
        assert isinstance(screen, BaseScreen)
        assert screen.SCREEN_NAME == name

    def test_unknown_screen_returns_none(self) -> None:
        assert get_screen_by_name("nonexistent_screen") is None

    def test_register_screen(self) -> None:
        class ExtraScreen(BaseScreen):
            SCREEN_NAME = "extra"

        register_screen("extra", ExtraScreen)
        assert isinstance(get_screen_by_name("extra"), ExtraScreen)
        assert "extra" in get_registered_screens()

    def test_new_instance_each_time(self) -> None:
        assert get_screen_by_name("devices") is not get_screen_by_name("devices")


class TestAppState:
    """Tests for application state management."""

    def test_app_state_defaults(self) -> None:
        state = AppState()
        assert len(state.catalog) == 0
        assert state.current_config is None
        assert state.review_device_filter is None

    def test_app_exposes_catalog_and_default_config(self) -> None:
        catalog = load_bundled_catalog()
        app = FoundryApp(catalog=catalog)
        assert app.catalog is catalog
        assert app.config == AppConfig()
        assert app.navigation_stack == []

    def test_update_config(self) -> None:
        app = FoundryApp()
        app.update_config(AppConfig(default_sort="price"))
        assert app.config.default_sort == "price"

    def test_review_filter(self) -> None:
        app = FoundryApp()
        app.set_review_device_filter("steam-deck-oled")
        assert app.app_state.review_device_filter == "steam-deck-oled"
        app.set_review_device_filter(None)
        assert app.app_state.review_device_filter is None

    def test_navigation_stack_is_copy(self) -> None:
        app = FoundryApp(catalog=Catalog.empty())
        stack = app.navigation_stack
        stack.append("test")
        assert "test" not in app.navigation_stack


class TestBackNavigation:
    """Tests for back navigation consistency."""

    @given(st.lists(st.sampled_from(get_registered_screens()), min_size=2, max_size=8))
    @settings(max_examples=50)
    def test_back_navigation_preserves_order(self, screens: list[str]) -> None:
        app = FoundryApp()
        app._navigation_stack.extend(screens)

        remaining = screens.copy()
        while len(app._navigation_stack) > 1:
            assert app._navigation_stack.pop() == remaining.pop()
            assert app._navigation_stack == remaining


def test_select_options_swap_pairs() -> None:
    assert as_select_options([("10", "10W"), ("15", "15W")]) == [("10W", "10"), ("15W", "15")]


class TestRunningApp:
    """Drives the app headlessly over the bundled catalog."""

    @pytest.mark.asyncio
    async def test_starts_on_main_menu(self) -> None:
        app = FoundryApp(catalog=load_bundled_catalog())
        async with app.run_test() as pilot:
            await pilot.pause()
            assert isinstance(app.screen, MainMenuScreen)
            assert app.navigation_stack == ["main_menu"]

    @pytest.mark.asyncio
    async def test_devices_screen_lists_catalog(self) -> None:
        app = FoundryApp(catalog=load_bundled_catalog())
        async with app.run_test(size=(160, 60)) as pilot:
            await pilot.pause()
            await pilot.press("1")
            await pilot.pause()
            assert isinstance(app.screen, DevicesScreen)
            assert app.screen.query_one("#devices-table", DataTable).row_count == 4
            assert app.screen.selection.selected == ("rog-ally-x", "gpd-win-max-2")

            await pilot.press("escape")
            await pilot.pause()
            assert isinstance(app.screen, MainMenuScreen)
            assert app.navigation_stack == ["main_menu"]

    @pytest.mark.asyncio
    async def test_compare_screen_builds_table(self) -> None:
        app = FoundryApp(catalog=load_bundled_catalog())
        async with app.run_test(size=(160, 60)) as pilot:
            await pilot.pause()
            await pilot.press("2")
            await pilot.pause()
            assert isinstance(app.screen, CompareScreen)
            table = app.screen.query_one("#compare-table", DataTable)
            assert table.row_count == 6
            assert len(table.columns) == 3

    @pytest.mark.asyncio
    async def test_processors_screen_charts_first_two_groups(self) -> None:
        app = FoundryApp(catalog=load_bundled_catalog())
        async with app.run_test(size=(160, 60)) as pilot:
            await pilot.pause()
            await pilot.press("3")
            await pilot.pause()
            screen = app.screen
            assert isinstance(screen, ProcessorsScreen)
            table = screen.query_one("#group-table", DataTable)
            assert table.row_count == 4
            assert [row.label for row in screen.bar_rows()] == ["Ryzen Z1 Extreme", "Ryzen 7 8840U"]

            table.focus()
            await pilot.pause()
            await pilot.press("c")
            await pilot.pause()
            assert screen.selection.chart_mode is ChartMode.LINE
            assert [row.wattage for row in screen.line_rows()] == [5, 10, 15, 17, 25, 30, 35]

            await pilot.press("c")
            await pilot.pause()
            assert screen.selection.chart_mode is ChartMode.BAR

    @pytest.mark.asyncio
    async def test_igpus_screen_merges_shared_igpu(self) -> None:
        app = FoundryApp(catalog=load_bundled_catalog())
        async with app.run_test(size=(160, 60)) as pilot:
            await pilot.pause()
            await pilot.press("4")
            await pilot.pause()
            screen = app.screen
            assert isinstance(screen, IGPUsScreen)
            assert screen.query_one("#group-table", DataTable).row_count == 3
            assert [row.label for row in screen.bar_rows()] == ["RDNA3 (12 CUs)", "RDNA2 (8 CUs)"]

    @staticmethod
    async def open_reviews_from_devices(app: FoundryApp, pilot: Pilot) -> str:
        """Highlight the first device row and press "v"; returns that device id."""
        await pilot.press("1")
        await pilot.pause()
        table = app.screen.query_one("#devices-table", DataTable)
        table.focus()
        await pilot.pause()
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        await pilot.press("v")
        await pilot.pause()
        return str(row_key.value)

    @pytest.mark.asyncio
    async def test_reviews_from_devices_filtered_until_left(self) -> None:
        app = FoundryApp(catalog=load_bundled_catalog())
        async with app.run_test(size=(160, 60)) as pilot:
            await pilot.pause()
            device_id = await self.open_reviews_from_devices(app, pilot)
            assert device_id == "gpd-win-max-2"

            screen = app.screen
            assert isinstance(screen, ReviewsScreen)
            assert app.app_state.review_device_filter == device_id
            visible = screen.visible_reviews()
            assert visible
            assert all(entry.device_id == device_id for entry in visible)

            await pilot.press("escape")
            await pilot.pause()
            assert isinstance(app.screen, DevicesScreen)
            assert app.app_state.review_device_filter is None

    @pytest.mark.asyncio
    async def test_x_shows_reviews_for_all_devices(self) -> None:
        app = FoundryApp(catalog=load_bundled_catalog())
        async with app.run_test(size=(160, 60)) as pilot:
            await pilot.pause()
            device_id = await self.open_reviews_from_devices(app, pilot)
            screen = app.screen
            assert isinstance(screen, ReviewsScreen)
            assert app.app_state.review_device_filter == device_id

            screen.query_one("#reviews-list", VerticalScroll).focus()
            await pilot.pause()
            await pilot.press("x")
            await pilot.pause()
            assert app.app_state.review_device_filter is None
            assert len(screen.visible_reviews()) == len(collect_reviews(app.catalog.devices))

    @pytest.mark.asyncio
    async def test_mount_logged_once_per_screen(self, monkeypatch: pytest.MonkeyPatch) -> None:
        events: list[tuple[str, dict]] = []

        class RecordingLogger:
            def info(self, event: str, **kw) -> None:
                events.append((event, kw))

            debug = warning = error = info

        monkeypatch.setattr("foundry.ui.screens.base.log", RecordingLogger())
        app = FoundryApp(catalog=load_bundled_catalog())
        async with app.run_test(size=(160, 60)) as pilot:
            await pilot.pause()
            for key in ("1", "escape", "2", "escape", "3", "escape", "5", "escape", "6"):
                await pilot.press(key)
                await pilot.pause()

        mounted = [kw["screen"] for event, kw in events if event == "Screen mounted"]
        assert sorted(mounted) == sorted(
            ["main_menu", "devices", "compare", "processors", "reviews", "settings"]
        )


class TestScreenOverrides:
    """The chart base classes leave their data hooks to subclasses."""

    def test_chart_screen_rows_must_be_overridden(self) -> None:
        screen = ChartScreen()
        assert screen.initial_selection() == ()
        with pytest.raises(NotImplementedError):
            screen.bar_rows()
        with pytest.raises(NotImplementedError):
            screen.line_rows()

    def test_group_screen_hooks_must_be_overridden(self) -> None:
        screen = GroupScreen()
        with pytest.raises(NotImplementedError):
            _ = screen.grouper
        with pytest.raises(NotImplementedError):
            screen.group_names()
        with pytest.raises(NotImplementedError):
            screen.table_items()

    def test_concrete_group_screens_provide_hooks(self) -> None:
        for screen in (ProcessorsScreen(), IGPUsScreen()):
            assert callable(screen.grouper)
