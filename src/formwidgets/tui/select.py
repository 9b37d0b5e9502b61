"""FormSelect widget — anchor button, floating menu panel, native list fallback.

Thin Textual adapter over SelectController: child widgets post messages,
handlers forward them to the controller, and refresh_view() re-renders the
children from controller state. Implements the SelectView protocol.

Focus transfers that hit an unmounted or hidden part are logged and dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from typing import Any

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from formwidgets.core.config import SelectConfig
from formwidgets.core.focus import FocusTarget
from formwidgets.core.keyboard import ANCHOR_KEYMAP
from formwidgets.core.options import MenuItem, Node, OptionValue
from formwidgets.core.presentation import Presentation
from formwidgets.core.select_controller import (
    UNSET,
    SelectCallbacks,
    SelectController,
)
from formwidgets.core.viewport import ViewportQuery
from formwidgets.tui.menu import SelectMenu
from formwidgets.tui.native_select import NativeSelect
from formwidgets.tui.popup import Popup, PopupCloser
from formwidgets.tui.scrolling import scroll_field_to_top

logger = logging.getLogger(__name__)

_ARROW_CLOSED = "▾"
_ARROW_OPENED = "▴"


class SelectButton(Static):
    """Focusable anchor showing the current selection or placeholder."""

    ALLOW_SELECT = False
    can_focus = True

    DEFAULT_CSS = """
    SelectButton {
        width: auto;
        min-width: 16;
        height: 1;
        padding: 0 1;
        background: $surface-lighten-1;
        color: $text;
    }

    SelectButton:hover {
        background: $surface-lighten-2;
    }

    SelectButton:focus {
        text-style: bold;
        background: $primary-muted;
    }

    SelectButton.-placeholder {
        color: $text-muted;
    }
    """

    class Clicked(Message):
        pass

    class Focused(Message):
        pass

    class Blurred(Message):
        pass

    class Resized(Message):
        pass

    class KeyDown(Message):
        def __init__(self, key: str) -> None:
            self.key = key
            super().__init__()

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._text = ""
        self._label = Text(" ")
        self._opened = False

    def set_label(
        self, content: str | Text, is_placeholder: bool, opened: bool, *, hide_tick: bool = False
    ) -> None:
        if isinstance(content, Text):
            self._text = content.plain
            label = content.copy()
        else:
            self._text = content or ""
            label = Text(self._text)
        if not label.plain:
            label = Text(" ")
        self._opened = opened
        if not hide_tick:
            label.append(f"  {_ARROW_OPENED if opened else _ARROW_CLOSED}")
        self._label = label
        self.update(label)
        self.set_class(is_placeholder, "-placeholder")

    @property
    def label_text(self) -> str:
        return self._text

    @property
    def label_content(self) -> Text:
        """What the button shows, tick included."""
        return self._label

    async def on_click(self, event: events.Click) -> None:
        event.stop()
        self.post_message(self.Clicked())

    def on_key(self, event: events.Key) -> None:
        if event.key in ANCHOR_KEYMAP:
            event.stop()
            event.prevent_default()
        self.post_message(self.KeyDown(event.key))

    def on_focus(self, event: events.Focus) -> None:
        self.post_message(self.Focused())

    def on_blur(self, event: events.Blur) -> None:
        self.post_message(self.Blurred())

    def on_resize(self, event: events.Resize) -> None:
        self.post_message(self.Resized())


class FormSelect(Widget):
    """Dropdown select with check, radio and radio-check modes.

    Named apart from ``textual.widgets.Select`` so its messages dispatch to
    ``on_form_select_*`` handlers.
    """

    DEFAULT_CSS = """
    FormSelect {
        width: auto;
        height: auto;
    }

    FormSelect.-width-available {
        width: 100%;
    }

    FormSelect.-width-available SelectButton {
        width: 100%;
    }

    FormSelect .select--label {
        width: auto;
        color: $text-muted;
    }

    FormSelect .select--sub {
        width: auto;
        color: $text-muted;
    }

    FormSelect.-invalid .select--sub {
        color: $error;
    }

    FormSelect.-invalid SelectButton {
        background: $error-muted;
    }

    FormSelect NativeSelect {
        display: none;
    }

    FormSelect.-native NativeSelect {
        display: block;
    }

    FormSelect.-native SelectButton {
        display: none;
    }
    """

    class Changed(Message):
        """Posted whenever the user changes the selection."""

        def __init__(self, select: FormSelect, value: list[OptionValue]) -> None:
            self.select = select
            self.value = value
            super().__init__()

        @property
        def control(self) -> FormSelect:
            return self.select

    class Toggled(Message):
        """Posted whenever the widget requests an opened state change."""

        def __init__(self, select: FormSelect, opened: bool) -> None:
            self.select = select
            self.opened = opened
            super().__init__()

        @property
        def control(self) -> FormSelect:
            return self.select

    class ClickOutside(Message):
        def __init__(self, select: FormSelect) -> None:
            self.select = select
            super().__init__()

        @property
        def control(self) -> FormSelect:
            return self.select

    def __init__(
        self,
        options: Iterable[Any] = (),
        *,
        config: SelectConfig | None = None,
        value: Sequence[OptionValue] | None = None,
        default_value: Sequence[OptionValue] | None = None,
        opened: bool | None = None,
        disabled: bool = False,
        callbacks: SelectCallbacks | None = None,
        viewport_query: ViewportQuery | None = None,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes, disabled=disabled)
        self.config = config or SelectConfig()
        self._host_callbacks = callbacks or SelectCallbacks()
        self.controller = SelectController(
            self.config,
            self,
            options=options,
            value=value,
            default_value=default_value,
            opened=opened,
            disabled=disabled,
            callbacks=replace(
                self._host_callbacks,
                on_change=self._changed,
                on_toggle=self._toggled,
                on_click_outside=self._clicked_outside,
            ),
            viewport_query=viewport_query,
        )
        self._button = SelectButton()
        self._native = NativeSelect(
            self.controller.native_rows(),
            self.controller.native_flags(),
            mode=self.config.mode,
        )
        self._menu: SelectMenu | None = None
        self._popup: Popup | None = None
        self._modifiers: frozenset[str] = frozenset()

    # -- Composition ---------------------------------------------------------

    def compose(self) -> ComposeResult:
        if self.config.label:
            yield Static(self.config.label, classes="select--label")
        yield self._button
        yield self._native
        if self.controller.panel_mountable:
            yield self._build_popup()
        sub = self.config.error or self.config.hint
        if sub:
            yield Static(sub, classes="select--sub")

    def _build_popup(self) -> Popup:
        self._menu = SelectMenu(
            self.controller.menu_content(),
            mode=self.config.mode,
            group_view=self.config.group_view,
            checked=self.controller.value,
        )
        self._popup = Popup(
            self._menu,
            directions=self.config.directions,
            main_offset=self.config.popup_main_offset,
            secondary_offset=self.config.popup_secondary_offset,
            header_title=self.config.mobile_title,
        )
        return self._popup

    def on_mount(self) -> None:
        self.watch(self, "disabled", self._disabled_changed, init=False)
        self.controller.viewport.update(self.app.size.width)
        self.controller.mount()
        self.refresh_view()

    def on_unmount(self) -> None:
        self.controller.unmount()

    def on_resize(self, event: events.Resize) -> None:
        self.viewport_resized(self.app.size.width)

    def viewport_resized(self, width: int) -> None:
        self.controller.viewport.update(width)

    def _disabled_changed(self, disabled: bool) -> None:
        self.controller.update(disabled=disabled)

    # -- Host API ------------------------------------------------------------

    @property
    def value(self) -> list[OptionValue]:
        return self.controller.value

    @property
    def opened(self) -> bool:
        return self.controller.opened

    @property
    def options(self) -> tuple[Node, ...]:
        return self.controller.nodes

    @property
    def form_value(self) -> str:
        return self.controller.form_value()

    @property
    def button(self) -> SelectButton:
        return self._button

    @property
    def native_select(self) -> NativeSelect:
        return self._native

    @property
    def popup(self) -> Popup | None:
        return self._popup

    @property
    def menu(self) -> SelectMenu | None:
        return self._menu

    def set_props(
        self,
        *,
        options: Iterable[Any] | None = UNSET,
        value: Sequence[OptionValue] | None = UNSET,
        opened: bool | None = UNSET,
        disabled: bool | None = None,
    ) -> None:
        """Apply host prop changes; ``None`` releases a controlled field."""
        if disabled is not None:
            self.disabled = disabled
        self.controller.update(options=options, value=value, opened=opened, disabled=disabled)

    def focus(self, scroll_visible: bool = True) -> FormSelect:
        self.controller.focus()
        return self

    def blur(self) -> FormSelect:
        self.controller.blur()
        return self

    def scroll_to_field(self) -> None:
        """Scroll the nearest scrollable ancestor so this field is on top."""
        scroll_field_to_top(self)

    # -- Controller callbacks ------------------------------------------------

    def _changed(self, value: list[OptionValue]) -> None:
        self.post_message(self.Changed(self, value))
        if self._host_callbacks.on_change is not None:
            self._host_callbacks.on_change(value)

    def _toggled(self, opened: bool) -> None:
        self.post_message(self.Toggled(self, opened))
        if self._host_callbacks.on_toggle is not None:
            self._host_callbacks.on_toggle(opened)

    def _clicked_outside(self) -> None:
        self.post_message(self.ClickOutside(self))
        if self._host_callbacks.on_click_outside is not None:
            self._host_callbacks.on_click_outside()

    # -- SelectView ----------------------------------------------------------

    def anchor_width(self) -> int | None:
        if not self._button.is_mounted:
            return None
        width = self._button.outer_size.width
        return width or None

    def focus_anchor(self) -> bool:
        return self._focus_part(self._button)

    def focus_panel(self) -> bool:
        if not self.has_panel():
            return False
        menu = self._menu
        if menu.highlighted is None and menu.option_count:
            menu.highlighted = self._first_checked_row(menu)
        return self._focus_part(menu)

    def focus_native(self) -> bool:
        return self._focus_part(self._native)

    def _focus_part(self, part: Widget) -> bool:
        if not part.is_mounted:
            logger.debug("focus skipped: %s not mounted", type(part).__name__)
            return False
        part.focus()
        return True

    def blur_active(self) -> None:
        if not self.is_mounted:
            return
        focused = self.screen.focused
        if focused is not None and self in focused.ancestors_with_self:
            self.screen.set_focus(None)

    def has_panel(self) -> bool:
        return (
            self._popup is not None
            and self._menu is not None
            and self._popup.is_mounted
            and self._menu.is_mounted
        )

    def scroll_highlighted_into_view(self, item: MenuItem | None) -> None:
        if self._menu is not None and self._menu.is_mounted:
            self._menu.scroll_item_into_view(item)

    def schedule(self, callback: Callable[[], None]) -> None:
        self.call_after_refresh(callback)

    def refresh_view(self) -> None:
        if not self.is_mounted:
            return
        controller = self.controller
        controller.sync_geometry()
        native = controller.presentation is Presentation.NATIVE

        self.remove_class(*self._modifiers)
        self._modifiers = controller.modifiers()
        self.add_class(*self._modifiers)
        self.set_class(native, "-native")

        content, is_placeholder = controller.button_text()
        self._button.set_label(
            content, is_placeholder, controller.opened, hide_tick=controller.config.hide_tick
        )
        self._native.set_rows(controller.native_rows(), controller.native_flags())

        if controller.panel_mountable and self._popup is None:
            self.mount(self._build_popup(), after=self._native)
        elif not controller.panel_mountable and self._popup is not None:
            self._drop_popup()

        if self._popup is not None:
            self._popup.apply_bounds(controller.popup_bounds, self.config.max_height)
            self._popup.set_screen_target(controller.state.is_mobile, self.config.mobile_title)
            self._popup.show(controller.panel_visible)
        if self._menu is not None:
            self._menu.set_content(controller.menu_content(), controller.value)

    def _drop_popup(self) -> None:
        popup = self._popup
        self._popup = None
        self._menu = None
        if popup.is_mounted:
            popup.remove()
        self.controller.panel_unmounted()

    def _first_checked_row(self, menu: SelectMenu) -> int:
        checked = set(self.controller.value)
        enabled = [index for index, row in enumerate(menu.rows) if not row.disabled]
        for index in enabled:
            if menu.rows[index].item.value in checked:
                return index
        return enabled[0] if enabled else 0

    def _classify(self, widget: Widget | None) -> FocusTarget:
        if widget is None:
            return FocusTarget.OUTSIDE
        if widget is self._button:
            return FocusTarget.ANCHOR
        if widget is self._native:
            return FocusTarget.NATIVE
        if self._popup is not None and self._popup in widget.ancestors_with_self:
            return FocusTarget.PANEL
        return FocusTarget.OUTSIDE

    # -- Child messages ------------------------------------------------------

    def on_select_button_clicked(self, event: SelectButton.Clicked) -> None:
        event.stop()
        self.controller.anchor_clicked()

    def on_select_button_key_down(self, event: SelectButton.KeyDown) -> None:
        event.stop()
        self.controller.anchor_key(event.key)

    def on_select_button_focused(self, event: SelectButton.Focused) -> None:
        event.stop()
        self.controller.anchor_focused()

    def on_select_button_blurred(self, event: SelectButton.Blurred) -> None:
        event.stop()
        self.controller.anchor_blurred()

    def on_select_button_resized(self, event: SelectButton.Resized) -> None:
        event.stop()
        self.controller.anchor_resized()

    def on_select_menu_item_check(self, event: SelectMenu.ItemCheck) -> None:
        event.stop()
        self.controller.item_checked(event.item)

    def on_select_menu_highlight_item(self, event: SelectMenu.HighlightItem) -> None:
        event.stop()
        self.controller.item_highlighted(event.item)

    def on_select_menu_key_down(self, event: SelectMenu.KeyDown) -> None:
        event.stop()
        self.controller.panel_key(event.key, event.item)

    def on_select_menu_focused(self, event: SelectMenu.Focused) -> None:
        event.stop()
        self.controller.panel_focused()

    def on_select_menu_blurred(self, event: SelectMenu.Blurred) -> None:
        event.stop()
        self.controller.panel_blurred(self._classify(event.target))

    def on_popup_ready(self, event: Popup.Ready) -> None:
        event.stop()
        event.popup.set_target(self._button)
        self.controller.panel_mounted()
        self.refresh_view()

    def on_popup_click_outside(self, event: Popup.ClickOutside) -> None:
        event.stop()
        self.controller.click_outside()

    def on_popup_closer_clicked(self, event: PopupCloser.Clicked) -> None:
        event.stop()
        self.controller.closer_clicked()

    def on_native_select_changed(self, event: NativeSelect.Changed) -> None:
        event.stop()
        self.controller.native_changed(event.flags)

    def on_native_select_focused(self, event: NativeSelect.Focused) -> None:
        event.stop()
        self.controller.native_focused()

    def on_native_select_blurred(self, event: NativeSelect.Blurred) -> None:
        event.stop()
        self.controller.native_blurred()

    def on_native_select_clicked(self, event: NativeSelect.Clicked) -> None:
        event.stop()
        self.controller.native_clicked()
