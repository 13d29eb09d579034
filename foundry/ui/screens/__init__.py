"""Screen components for the TUI application."""

from .base import BaseScreen
from .compare import CompareScreen
from .devices import DevicesScreen
from .groups import IGPUsScreen, ProcessorsScreen
from .main_menu import MainMenuScreen
from .reviews import ReviewsScreen
from .settings import SettingsScreen

# Screen registry for navigation
_SCREEN_REGISTRY: dict[str, type[BaseScreen]] = {
    "main_menu": MainMenuScreen,
    "devices": DevicesScreen,
    "compare": CompareScreen,
    "processors": ProcessorsScreen,
    "igpus": IGPUsScreen,
    "reviews": ReviewsScreen,
    "settings": SettingsScreen,
}


def get_screen_by_name(name: str) -> BaseScreen | None:
    """Get a new screen instance by its registered name.

    Returns:
        A new instance of the screen, or None if not found
    """
    screen_class = _SCREEN_REGISTRY.get(name)
    if screen_class:
        return screen_class()
    return None


def register_screen(name: str, screen_class: type[BaseScreen]) -> None:
    _SCREEN_REGISTRY[name] = screen_class


def get_registered_screens() -> list[str]:
    return list(_SCREEN_REGISTRY.keys())


__all__ = [
    "BaseScreen",
    "CompareScreen",
    "DevicesScreen",
    "IGPUsScreen",
    "MainMenuScreen",
    "ProcessorsScreen",
    "ReviewsScreen",
    "SettingsScreen",
    "get_registered_screens",
    "get_screen_by_name",
    "register_screen",
]
