"""Single-line text field with optional label, hint/error line and clear button.

Wraps Textual's Input. Passing ``value`` makes the field controlled: user
edits are reported through Changed and then reverted to the host's value
until the host passes the new one back via set_value().
"""

from __future__ import annotations

import logging

from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Input, Static

from formwidgets.core.class_names import modifier_classes
from formwidgets.core.value_mirror import ValueMirror
from formwidgets.tui.scrolling import scroll_field_to_top

logger = logging.getLogger(__name__)


class ClearButton(Static):
    """Clickable ✕ that empties the field."""

    class Clicked(Message):
        pass

    def __init__(self, **kwargs) -> None:
        super().__init__(" ✕ ", **kwargs)

    def on_click(self, event: events.Click) -> None:
        event.stop()
        self.post_message(self.Clicked())


class TextInput(Vertical):
    DEFAULT_CSS = """
    TextInput {
        height: auto;
        width: 1fr;
    }
    TextInput .text-input--label {
        color: $text-muted;
    }
    TextInput .text-input--row {
        height: auto;
    }
    TextInput Input {
        width: 1fr;
    }
    TextInput ClearButton {
        width: auto;
        height: 1;
        margin-top: 1;
        color: $text-muted;
        display: none;
    }
    TextInput.-has-clear.-has-value ClearButton {
        display: block;
    }
    TextInput .text-input--sub {
        color: $text-muted;
    }
    TextInput.-invalid .text-input--sub {
        color: $error;
    }
    """

    class Changed(Message):
        def __init__(self, text_input: TextInput, value: str) -> None:
            self.text_input = text_input
            self.value = value
            super().__init__()

        @property
        def control(self) -> TextInput:
            return self.text_input

    class Cleared(Message):
        def __init__(self, text_input: TextInput) -> None:
            self.text_input = text_input
            super().__init__()

        @property
        def control(self) -> TextInput:
            return self.text_input

    def __init__(
        self,
        *,
        value: str | None = None,
        default_value: str = "",
        placeholder: str = "",
        label: str | None = None,
        hint: str | None = None,
        error: str | None = None,
        clear: bool = False,
        max_length: int = 0,
        password: bool = False,
        disabled: bool = False,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes, disabled=disabled)
        self._mirror = ValueMirror(default_value, value=value)
        self._label = label
        self._sub = error or hint
        self._error = error
        self._clear = clear
        self._input = Input(
            value=self._mirror.value,
            placeholder=placeholder,
            max_length=max_length,
            password=password,
        )
        self._modifiers: frozenset[str] = frozenset()

    def compose(self) -> ComposeResult:
        if self._label:
            yield Static(self._label, classes="text-input--label")
        with Horizontal(classes="text-input--row"):
            yield self._input
            yield ClearButton()
        if self._sub:
            yield Static(self._sub, classes="text-input--sub")

    def on_mount(self) -> None:
        self._refresh_classes()

    @property
    def value(self) -> str:
        return self._mirror.value

    @property
    def focused(self) -> bool:
        return self._mirror.focused

    @property
    def control(self) -> Input:
        return self._input

    def set_value(self, value: str | None) -> None:
        """Host prop update; ``None`` releases control."""
        self._mirror.sync(value)
        self._show(self._mirror.value)

    def _show(self, value: str) -> None:
        if self._input.value != value:
            self._input.value = value
        self._refresh_classes()

    def _refresh_classes(self) -> None:
        self.remove_class(*self._modifiers)
        self._modifiers = modifier_classes(
            {
                "focused": self._mirror.focused,
                "has-value": bool(self._mirror.value),
                "has-clear": self._clear,
                "has-label": bool(self._label),
                "invalid": bool(self._error),
                "disabled": self.disabled,
            }
        )
        self.add_class(*self._modifiers)

    def _change(self, value: str) -> None:
        self._mirror.change(value)
        self.post_message(self.Changed(self, value))
        self._show(self._mirror.value)

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        if event.value == self._mirror.value:
            return
        self._change(event.value)

    def on_clear_button_clicked(self, event: ClearButton.Clicked) -> None:
        event.stop()
        self._change("")
        self.post_message(self.Cleared(self))
        self.focus()

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        self._mirror.focused = True
        self._refresh_classes()

    def on_descendant_blur(self, event: events.DescendantBlur) -> None:
        self._mirror.focused = False
        self._refresh_classes()

    def focus(self, scroll_visible: bool = True) -> TextInput:
        self._input.focus(scroll_visible)
        return self

    def blur(self) -> TextInput:
        self._input.blur()
        return self

    def scroll_to_field(self) -> None:
        scroll_field_to_top(self)
