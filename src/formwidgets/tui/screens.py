"""Screen mixin that feeds screen-level input to form widgets.

Popups only see presses that land on them, so the screen forwards every
mouse-down for click-outside detection. Screen resizes are forwarded to
each FormSelect as the current viewport width.
"""

from __future__ import annotations

from textual import events
from textual.screen import Screen

from formwidgets.tui.popup import Popup
from formwidgets.tui.select import FormSelect


class ClickOutsideScreen:
    """Mix into a Screen subclass ahead of Screen."""

    def on_mouse_down(self, event: events.MouseDown) -> None:
        for popup in self.query(Popup):
            popup.click_outside(event.screen_offset)

    def on_resize(self, event: events.Resize) -> None:
        for select in self.query(FormSelect):
            select.viewport_resized(event.size.width)


class FormScreen(ClickOutsideScreen, Screen):
    pass
