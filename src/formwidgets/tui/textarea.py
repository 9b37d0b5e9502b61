"""Multi-line text field wrapping Textual's TextArea.

Same controlled/uncontrolled contract as TextInput. ``autosize`` grows the
area with its content between ``min_rows`` and ``max_rows``; ``max_length``
truncates edits that would exceed it.
"""

from __future__ import annotations

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Static, TextArea

from formwidgets.core.class_names import modifier_classes
from formwidgets.core.value_mirror import ValueMirror
from formwidgets.tui.scrolling import scroll_field_to_top


def clamp_rows(line_count: int, min_rows: int, max_rows: int | None) -> int:
    rows = max(line_count, min_rows)
    if max_rows is not None:
        rows = min(rows, max_rows)
    return rows


class Textarea(Vertical):
    DEFAULT_CSS = """
    Textarea {
        height: auto;
        width: 1fr;
    }
    Textarea .textarea--label {
        color: $text-muted;
    }
    Textarea TextArea {
        height: 5;
    }
    Textarea .textarea--sub {
        color: $text-muted;
    }
    Textarea.-invalid .textarea--sub {
        color: $error;
    }
    """

    class Changed(Message):
        def __init__(self, textarea: Textarea, value: str) -> None:
            self.textarea = textarea
            self.value = value
            super().__init__()

        @property
        def control(self) -> Textarea:
            return self.textarea

    class HeightChanged(Message):
        def __init__(self, textarea: Textarea, rows: int) -> None:
            self.textarea = textarea
            self.rows = rows
            super().__init__()

    def __init__(
        self,
        *,
        value: str | None = None,
        default_value: str = "",
        placeholder: str = "",
        label: str | None = None,
        hint: str | None = None,
        error: str | None = None,
        max_length: int | None = None,
        autosize: bool = True,
        min_rows: int = 1,
        max_rows: int | None = None,
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
        self._max_length = max_length
        self._autosize = autosize
        self._min_rows = min_rows
        self._max_rows = max_rows
        self._rows: int | None = None
        self._area = TextArea(self._mirror.value, placeholder=placeholder)
        self._modifiers: frozenset[str] = frozenset()

    def compose(self) -> ComposeResult:
        if self._label:
            yield Static(self._label, classes="textarea--label")
        yield self._area
        if self._sub:
            yield Static(self._sub, classes="textarea--sub")

    def on_mount(self) -> None:
        self._refresh_view()

    @property
    def value(self) -> str:
        return self._mirror.value

    @property
    def focused(self) -> bool:
        return self._mirror.focused

    @property
    def control(self) -> TextArea:
        return self._area

    @property
    def rows(self) -> int | None:
        return self._rows

    def set_value(self, value: str | None) -> None:
        self._mirror.sync(value)
        self._show(self._mirror.value)

    def _show(self, value: str) -> None:
        if self._area.text != value:
            self._area.text = value
        self._refresh_view()

    def _refresh_view(self) -> None:
        self.remove_class(*self._modifiers)
        self._modifiers = modifier_classes(
            {
                "focused": self._mirror.focused,
                "has-value": bool(self._mirror.value),
                "has-label": bool(self._label),
                "invalid": bool(self._error),
                "autosize": self._autosize,
                "disabled": self.disabled,
            }
        )
        self.add_class(*self._modifiers)
        if not self._autosize:
            return
        # Two extra rows for the TextArea border.
        rows = clamp_rows(self._mirror.value.count("\n") + 1, self._min_rows, self._max_rows)
        if rows != self._rows:
            self._rows = rows
            self._area.styles.height = rows + 2
            self.post_message(self.HeightChanged(self, rows))

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        event.stop()
        text = self._area.text
        if self._max_length is not None and len(text) > self._max_length:
            text = text[: self._max_length]
        if text == self._mirror.value:
            if self._area.text != text:
                self._area.text = text
            return
        self._mirror.change(text)
        self.post_message(self.Changed(self, text))
        self._show(self._mirror.value)

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        self._mirror.focused = True
        self._refresh_view()

    def on_descendant_blur(self, event: events.DescendantBlur) -> None:
        self._mirror.focused = False
        self._refresh_view()

    def focus(self, scroll_visible: bool = True) -> Textarea:
        self._area.focus(scroll_visible)
        return self

    def blur(self) -> Textarea:
        self._area.blur()
        return self

    def scroll_to_field(self) -> None:
        scroll_field_to_top(self)
