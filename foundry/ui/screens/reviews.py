"""Reviews screen: searchable list of device reviews."""

from typing import ClassVar

from typing_extensions import override

from rich.console import Group
from rich.panel import Panel
from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.widgets import Input, Static

import structlog

from foundry.models import ReviewEntry
from foundry.services.filtering import collect_reviews, filter_reviews

from .base import BaseScreen

log = structlog.stdlib.get_logger()


def render_review(entry: ReviewEntry) -> Panel:
    """Render one review as a panel with rating, pros and cons."""
    review = entry.review
    body = Text()
    meta = [part for part in (review.source, review.date) if part]
    if review.rating is not None:
        meta.append(f"{review.rating:g}/10")
    body.append(" · ".join(meta) + "\n", style="dim")
    body.append(review.summary + "\n")
    for pro in review.pros:
        body.append(f"+ {pro}\n", style="green")
    for con in review.cons:
        body.append(f"- {con}\n", style="red")
    parts: list[Text] = [body]
    if review.url:
        parts.append(Text(review.url, style="underline blue"))
    return Panel(Group(*parts), title=f"{entry.device_name}: {review.heading}", title_align="left")


class ReviewsScreen(BaseScreen):
    """All reviews, optionally restricted to one device."""

    SCREEN_TITLE: ClassVar[str] = "Reviews"
    SCREEN_NAME: ClassVar[str] = "reviews"

    CSS: ClassVar[str] = """
    #reviews-container {
        padding: 1 2;
    }

    #reviews-status {
        color: $text-muted;
        margin-bottom: 1;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("f", "focus_search", "Search", show=True),
        Binding("x", "clear_device_filter", "All devices", show=True),
    ]

    _query: str
    _entries: list[ReviewEntry]

    def __init__(self) -> None:
        super().__init__()
        self._query = ""
        self._entries = []

    @property
    def device_filter(self) -> str | None:
        return self.foundry_app.app_state.review_device_filter

    @override
    def compose(self) -> ComposeResult:
        with Container(id="reviews-container"):
            yield self.create_title_widget()
            yield Input(placeholder="Search reviews…", id="review-search")
            yield Static("", id="reviews-status")
            yield VerticalScroll(id="reviews-list")

    @override
    async def on_mount(self) -> None:
        self._entries = collect_reviews(self.catalog.devices)
        await self.refresh_reviews()

    @override
    async def on_unmount(self) -> None:
        # The device restriction only applies to the visit that set it.
        self.foundry_app.set_review_device_filter(None)

    def visible_reviews(self) -> list[ReviewEntry]:
        return filter_reviews(self._entries, self._query, self.device_filter)

    async def refresh_reviews(self) -> None:
        matches = self.visible_reviews()
        container = self.query_one("#reviews-list", VerticalScroll)
        await container.remove_children()
        if matches:
            await container.mount_all(Static(render_review(entry)) for entry in matches)
        else:
            await container.mount(Static("No reviews match.", classes="empty"))

        status = f"{len(matches)} review(s)"
        device = self.catalog.get(self.device_filter) if self.device_filter else None
        if device is not None:
            status += f" for {device.name} (press x to show all)"
        self.query_one("#reviews-status", Static).update(status)
        log.debug("Reviews refreshed", query=self._query, device_id=self.device_filter, shown=len(matches))

    async def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "review-search":
            self._query = event.value
            await self.refresh_reviews()

    def action_focus_search(self) -> None:
        self.query_one("#review-search", Input).focus()

    async def action_clear_device_filter(self) -> None:
        self.foundry_app.set_review_device_filter(None)
        await self.refresh_reviews()
