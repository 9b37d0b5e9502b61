"""Floating panel positioned against an anchor widget.

Rendered as a screen overlay directly after its anchor in the layout, so it
opens below the anchor by default and is shifted above it when the first
allowed direction points up. Textual's ``constrain`` keeps it on screen.

This module has no dependencies on other formwidgets.tui modules.
"""

from __future__ import annotations

from collections.abc import Sequence

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.geometry import Offset
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from formwidgets.core.geometry import PopupBounds


class PopupCloser(Static):
    """Closer glyph in the popup header."""

    class Clicked(Message):
        """Posted when the closer is clicked."""

    def __init__(self, **kwargs) -> None:
        super().__init__(" ✕ ", **kwargs)

    def on_click(self, event) -> None:
        event.stop()
        self.post_message(self.Clicked())


class PopupHeader(Horizontal):
    """Title row with a closer, shown when the popup covers the screen."""

    DEFAULT_CSS = """
    PopupHeader {
        height: 1;
        width: 100%;
        background: $panel-darken-1;
    }
    PopupHeader .popup-header--title {
        width: 1fr;
        text-style: bold;
        color: $text;
    }
    PopupHeader PopupCloser {
        width: auto;
        color: $text-muted;
    }
    PopupHeader PopupCloser:hover {
        color: $text;
    }
    """

    def __init__(self, title: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._title = title

    def compose(self) -> ComposeResult:
        yield Static(self._title, classes="popup-header--title")
        yield PopupCloser()

    def set_title(self, title: str) -> None:
        self._title = title
        if self.is_mounted:
            self.query_one(".popup-header--title", Static).update(title)


class Popup(Vertical):
    """Overlay container with min/max width bounds and click-outside detection."""

    DEFAULT_CSS = """
    Popup {
        overlay: screen;
        constrain: none inside;
        display: none;
        width: auto;
        height: auto;
        max-height: 12;
        background: $panel;
        color: $text;
        border: round $primary-muted;
        padding: 0;
    }

    Popup.-visible {
        display: block;
    }

    Popup.-screen {
        width: 100%;
        max-width: 100%;
    }

    Popup PopupHeader {
        display: none;
    }

    Popup.-screen PopupHeader {
        display: block;
    }
    """

    class Ready(Message):
        """Posted once the popup is mounted and can receive a target."""

        def __init__(self, popup: Popup) -> None:
            self.popup = popup
            super().__init__()

    class ClickOutside(Message):
        """Posted when a mouse press lands outside both popup and anchor."""

        def __init__(self, popup: Popup) -> None:
            self.popup = popup
            super().__init__()

        @property
        def control(self) -> Popup:
            return self.popup

    def __init__(
        self,
        content: Widget | None = None,
        *,
        directions: Sequence[str] = ("bottom-left",),
        main_offset: int = 0,
        secondary_offset: int = 0,
        header_title: str = "",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._content = content
        self._directions = tuple(directions)
        self._main_offset = main_offset
        self._secondary_offset = secondary_offset
        self._header_title = header_title
        self._target: Widget | None = None
        self._open = False

    def compose(self) -> ComposeResult:
        yield PopupHeader(self._header_title)
        if self._content is not None:
            yield self._content

    def on_mount(self) -> None:
        self.post_message(self.Ready(self))

    # -- Positioner contract -------------------------------------------------

    def set_target(self, target: Widget | None) -> None:
        self._target = target
        self.reposition()

    @property
    def target(self) -> Widget | None:
        return self._target

    def get_inner_node(self) -> Widget | None:
        """The scrollable content widget."""
        return self._content

    @property
    def is_open(self) -> bool:
        return self._open

    def show(self, flag: bool) -> None:
        self._open = bool(flag)
        self.set_class(self._open, "-visible")
        if self._open:
            self.reposition()

    def set_screen_target(self, on_screen: bool, title: str) -> None:
        """Cover the screen width with a title bar (small viewports)."""
        self.set_class(on_screen, "-screen")
        self._header_title = title
        if self.is_mounted:
            self.query_one(PopupHeader).set_title(title)

    def apply_bounds(self, bounds: PopupBounds, max_height: int | None = None) -> None:
        self.styles.min_width = bounds.min_width
        self.styles.max_width = bounds.max_width
        if max_height is not None:
            self.styles.max_height = max_height

    def reposition(self) -> None:
        if not self.is_mounted:
            return
        opens_up = bool(self._directions) and self._directions[0].startswith("top")
        if opens_up and self._target is not None:
            dy = -(self.outer_size.height + self._target.outer_size.height + self._main_offset)
        else:
            dy = self._main_offset
        self.styles.offset = (self._secondary_offset, dy)

    def on_resize(self, event) -> None:
        self.reposition()

    # -- Click outside -------------------------------------------------------

    def click_outside(self, screen_offset: Offset) -> bool:
        """Check a screen-level mouse press; post ClickOutside if it missed."""
        if not self._open:
            return False
        if self.region.contains_point(screen_offset):
            return False
        if self._target is not None and self._target.region.contains_point(screen_offset):
            return False
        self.post_message(self.ClickOutside(self))
        return True

