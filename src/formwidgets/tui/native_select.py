"""Flat list control used in place of the popup on small viewports.

Mirrors a platform <select>: header rows are disabled, an optional
placeholder row sits first for single-select lists, and every option row
carries a (selected, disabled) flag pair. Changes are reported as the full
flag list so the owner can reconcile values positionally.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import OptionList
from textual.widgets.option_list import Option as ListOption

from formwidgets.core.presentation import NativeEntry
from formwidgets.core.selection_state import SelectionMode


def _prompt(entry: NativeEntry, selected: bool, multiple: bool) -> Text:
    indent = "  " * entry.depth
    if entry.kind == "header":
        return Text(f"{indent}{entry.label}", style="bold dim")
    if entry.kind == "placeholder":
        return Text(f"{indent}{entry.label}", style="dim")
    if multiple:
        marker = "[x]" if selected else "[ ]"
    else:
        marker = "(*)" if selected else "( )"
    return Text(f"{indent}{marker} {entry.label}")


class NativeSelect(OptionList):
    """Native-style list; posts Changed with per-option flags."""

    DEFAULT_CSS = """
    NativeSelect {
        height: auto;
        max-height: 8;
        border: tall $border-blurred;
    }
    NativeSelect:focus {
        border: tall $border;
    }
    """

    class Changed(Message):
        """The selected set changed; ``flags`` excludes header rows."""

        def __init__(self, native: NativeSelect, flags: list[tuple[bool, bool]]) -> None:
            self.native = native
            self.flags = flags
            super().__init__()

    class Focused(Message):
        pass

    class Blurred(Message):
        pass

    class Clicked(Message):
        pass

    def __init__(
        self,
        entries: Sequence[NativeEntry] = (),
        flags: Sequence[tuple[bool, bool]] = (),
        *,
        mode: SelectionMode = SelectionMode.CHECK,
        **kwargs,
    ) -> None:
        self._mode = SelectionMode(mode)
        self._entries = list(entries)
        self._flags = list(flags)
        super().__init__(*self._list_options(), **kwargs)

    @property
    def multiple(self) -> bool:
        return self._mode is SelectionMode.CHECK

    @property
    def entries(self) -> list[NativeEntry]:
        return list(self._entries)

    @property
    def flags(self) -> list[tuple[bool, bool]]:
        return list(self._flags)

    def _option_rows(self) -> list[int]:
        """Row index of each native option, in flag order."""
        return [index for index, entry in enumerate(self._entries) if entry.is_option]

    def _list_options(self) -> list[ListOption]:
        selected_by_row = {
            row: flag[0] for row, flag in zip(self._option_rows(), self._flags)
        }
        return [
            ListOption(
                _prompt(entry, selected_by_row.get(index, False), self.multiple),
                disabled=entry.disabled,
            )
            for index, entry in enumerate(self._entries)
        ]

    def set_rows(
        self, entries: Sequence[NativeEntry], flags: Sequence[tuple[bool, bool]]
    ) -> None:
        entries = list(entries)
        flags = list(flags)
        if entries == self._entries and flags == self._flags:
            return
        highlighted = self.highlighted
        self._entries = entries
        self._flags = flags
        self.clear_options()
        self.add_options(self._list_options())
        if highlighted is not None and highlighted < len(self._entries):
            self.highlighted = highlighted

    def choose_row(self, row: int) -> None:
        """Apply a user pick on ``row`` the way a native control would."""
        option_rows = self._option_rows()
        if row not in option_rows:
            return
        position = option_rows.index(row)
        selected, disabled = self._flags[position]
        if disabled:
            return
        if self.multiple:
            self._flags[position] = (not selected, disabled)
        else:
            self._flags = [
                (index == position, flag_disabled)
                for index, (_sel, flag_disabled) in enumerate(self._flags)
            ]
        self.post_message(self.Changed(self, list(self._flags)))

    # -- Events --------------------------------------------------------------

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.choose_row(event.option_index)

    def on_key(self, event: events.Key) -> None:
        if event.key == "space":
            event.stop()
            event.prevent_default()
            if self.highlighted is not None:
                self.choose_row(self.highlighted)

    def on_click(self, event: events.Click) -> None:
        self.post_message(self.Clicked())

    def on_focus(self, event: events.Focus) -> None:
        self.post_message(self.Focused())

    def on_blur(self, event: events.Blur) -> None:
        self.post_message(self.Blurred())
