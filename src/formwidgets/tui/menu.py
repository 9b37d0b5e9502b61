"""List renderer for the select panel — an OptionList over the option tree.

Groups become disabled title rows (or share a row with their first item in
``line`` group view). Leaves carry a check marker. Keys the select cares
about are consumed here and reported as KeyDown; committing a row is left to
the owner so keyboard and click commits take the same path.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget
from textual.widgets import OptionList
from textual.widgets.option_list import Option as ListOption

from formwidgets.core.config import GroupView
from formwidgets.core.keyboard import PANEL_KEYMAP
from formwidgets.core.options import MenuGroup, MenuItem, MenuNode, OptionValue
from formwidgets.core.scroll import SCROLL_TO_NORMAL_DURATION, highlight_scroll_target
from formwidgets.core.selection_state import SelectionMode

_CHECK_ON = "✓"
_RADIO_ON = "●"
_RADIO_OFF = "○"


@dataclass(frozen=True)
class MenuRow:
    """One OptionList row: its prompt and the item it commits (None for titles)."""

    prompt: Text
    item: MenuItem | None = None

    @property
    def disabled(self) -> bool:
        return self.item is None


def _marker(mode: SelectionMode, checked: bool) -> str:
    if mode is SelectionMode.RADIO:
        return _RADIO_ON if checked else _RADIO_OFF
    return _CHECK_ON if checked else " "


def _title(title) -> Text:
    return Text(title, style="bold") if isinstance(title, str) else title.copy()


def menu_rows(
    content: Sequence[MenuNode],
    mode: SelectionMode,
    checked: Sequence[OptionValue],
    group_view: GroupView = GroupView.DEFAULT,
    depth: int = 0,
) -> list[MenuRow]:
    """Flatten renderer content into rows, in the same order as flatten()."""
    rows: list[MenuRow] = []
    indent = "  " * depth
    for node in content:
        if isinstance(node, MenuGroup):
            children = menu_rows(node.content, mode, checked, group_view, depth + 1)
            if group_view is GroupView.LINE and children and children[0].item is not None:
                head = children[0]
                prompt = Text(indent)
                prompt.append_text(_title(node.title))
                prompt.append("  ")
                prompt.append_text(head.prompt)
                rows.append(MenuRow(prompt, head.item))
                rows.extend(children[1:])
            else:
                prompt = Text(indent)
                prompt.append_text(_title(node.title))
                rows.append(MenuRow(prompt))
                rows.extend(children)
            continue
        is_checked = node.value in checked
        prompt = Text(f"{indent}{_marker(mode, is_checked)} ")
        prompt.append_text(node.content)
        if is_checked:
            prompt.stylize("bold")
        rows.append(MenuRow(prompt, node))
    return rows


class SelectMenu(OptionList):
    """Selectable rows for the select panel."""

    DEFAULT_CSS = """
    SelectMenu {
        height: auto;
        max-height: 10;
        border: none;
        padding: 0;
        background: $panel;
    }
    SelectMenu:focus {
        border: none;
    }
    """

    class ItemCheck(Message):
        """A row was clicked."""

        def __init__(self, menu: SelectMenu, item: MenuItem) -> None:
            self.menu = menu
            self.item = item
            super().__init__()

    class HighlightItem(Message):
        def __init__(self, menu: SelectMenu, item: MenuItem | None) -> None:
            self.menu = menu
            self.item = item
            super().__init__()

    class KeyDown(Message):
        """Any key pressed while the menu has focus, after internal handling."""

        def __init__(self, menu: SelectMenu, key: str, item: MenuItem | None) -> None:
            self.menu = menu
            self.key = key
            self.item = item
            super().__init__()

    class Focused(Message):
        def __init__(self, menu: SelectMenu) -> None:
            self.menu = menu
            super().__init__()

    class Blurred(Message):
        """The menu lost focus; ``target`` is where focus went (None if nowhere)."""

        def __init__(self, menu: SelectMenu, target: Widget | None) -> None:
            self.menu = menu
            self.target = target
            super().__init__()

    def __init__(
        self,
        content: Sequence[MenuNode] = (),
        *,
        mode: SelectionMode = SelectionMode.CHECK,
        group_view: GroupView = GroupView.DEFAULT,
        checked: Sequence[OptionValue] = (),
        **kwargs,
    ) -> None:
        self._content = tuple(content)
        self._mode = SelectionMode(mode)
        self._group_view = GroupView(group_view)
        self._checked = list(checked)
        self._rows = menu_rows(self._content, self._mode, self._checked, self._group_view)
        super().__init__(*self._list_options(), **kwargs)

    def _list_options(self) -> list[ListOption]:
        return [ListOption(row.prompt, disabled=row.disabled) for row in self._rows]

    # -- Content -------------------------------------------------------------

    @property
    def rows(self) -> list[MenuRow]:
        return list(self._rows)

    @property
    def checked(self) -> list[OptionValue]:
        return list(self._checked)

    @property
    def highlighted_item(self) -> MenuItem | None:
        index = self.highlighted
        if index is None or not 0 <= index < len(self._rows):
            return None
        return self._rows[index].item

    def set_content(
        self, content: Sequence[MenuNode], checked: Sequence[OptionValue]
    ) -> None:
        content = tuple(content)
        checked = list(checked)
        if content == self._content and checked == self._checked:
            return
        self._content = content
        self._checked = checked
        self._rebuild()

    def _rebuild(self) -> None:
        highlighted = self.highlighted
        self._rows = menu_rows(self._content, self._mode, self._checked, self._group_view)
        self.clear_options()
        self.add_options(self._list_options())
        if highlighted is not None and highlighted < len(self._rows):
            self.highlighted = highlighted

    def scroll_item_into_view(self, item: MenuItem | None) -> None:
        if item is None:
            return
        for index, row in enumerate(self._rows):
            if row.item is item or (row.item is not None and row.item.value == item.value):
                break
        else:
            return
        target = highlight_scroll_target(
            index, 1, self.scroll_y, self.scrollable_content_region.height
        )
        if target is not None:
            self.scroll_to(y=target, animate=True, duration=SCROLL_TO_NORMAL_DURATION)

    # -- Events --------------------------------------------------------------

    def on_key(self, event: events.Key) -> None:
        key = event.key
        if key in PANEL_KEYMAP:
            event.stop()
            event.prevent_default()
            if key == "up":
                self.action_cursor_up()
            elif key == "down":
                self.action_cursor_down()
        self.post_message(self.KeyDown(self, key, self.highlighted_item))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        row = self._rows[event.option_index]
        if row.item is not None:
            self.post_message(self.ItemCheck(self, row.item))

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        event.stop()
        row = self._rows[event.option_index]
        self.post_message(self.HighlightItem(self, row.item))

    def on_focus(self, event: events.Focus) -> None:
        self.post_message(self.Focused(self))

    def on_blur(self, event: events.Blur) -> None:
        self.post_message(self.Blurred(self, self.screen.focused))
