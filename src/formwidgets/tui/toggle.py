"""Boolean toggle rendered as a clickable chip."""

from __future__ import annotations

from textual import events
from textual.message import Message
from textual.widgets import Static

from formwidgets.core.value_mirror import ValueMirror
from formwidgets.tui.scrolling import scroll_field_to_top


class Toggle(Static):
    """Label + ON/OFF state inline. Click or Space toggles the value.

    Passing ``checked`` makes the toggle controlled: it keeps showing the
    host's value and only posts Changed.
    """

    ALLOW_SELECT = False
    can_focus = True

    DEFAULT_CSS = """
    Toggle {
        width: auto;
        height: 1;
        text-style: bold;
        background: $accent;
        color: $text;
    }

    Toggle:hover {
        background: $primary;
        color: $text;
    }

    Toggle:focus {
        text-style: bold underline;
        background: $primary;
        color: $text;
    }

    Toggle.-off {
        text-style: bold;
        background: $surface-lighten-1;
        color: $text-muted;
    }

    Toggle.-off:focus {
        text-style: bold underline;
        background: $surface-lighten-2;
        color: $text;
    }

    Toggle.-invalid {
        color: $error;
    }
    """

    class Changed(Message):
        def __init__(self, toggle: Toggle, checked: bool, value: str | None) -> None:
            self.toggle = toggle
            self.checked = checked
            self.value = value
            super().__init__()

        @property
        def control(self) -> Toggle:
            return self.toggle

    def __init__(
        self,
        label: str,
        *,
        checked: bool | None = None,
        value: str | None = None,
        error: str | None = None,
        disabled: bool = False,
        **kwargs,
    ):
        super().__init__("", disabled=disabled, **kwargs)
        self._base_label = label
        self.form_value = value
        self._error = error
        self._mirror = ValueMirror(False, value=checked)
        self._refresh_label()

    @property
    def checked(self) -> bool:
        return self._mirror.value

    @property
    def focused(self) -> bool:
        return self._mirror.focused

    def set_checked(self, checked: bool | None) -> None:
        """Host prop update; ``None`` releases control."""
        self._mirror.sync(checked)
        self._refresh_label()

    def _refresh_label(self):
        label = f" {self._base_label}  {'ON' if self.checked else 'OFF'} "
        if self._error:
            label += f" {self._error} "
        self.update(label)
        self.set_class(not self.checked, "-off")
        self.set_class(bool(self._error), "-invalid")

    def _toggle(self) -> None:
        if self.disabled:
            return
        requested = not self.checked
        self._mirror.change(requested)
        self._refresh_label()
        self.post_message(self.Changed(self, requested, self.form_value))

    async def on_click(self, event) -> None:
        event.stop()
        self._toggle()

    def on_key(self, event: events.Key) -> None:
        if event.key == "space":
            event.stop()
            event.prevent_default()
            self._toggle()

    def on_focus(self, event: events.Focus) -> None:
        self._mirror.focused = True

    def on_blur(self, event: events.Blur) -> None:
        self._mirror.focused = False

    def scroll_to_field(self) -> None:
        scroll_field_to_top(self)
