"""Select controller — wires store, focus, keyboard, geometry and mode bridge.

Rendering-agnostic: every widget event arrives as a method call and every
host notification leaves through SelectCallbacks. The Textual Select widget
is a thin adapter over this class.

// [LAW:locality-or-seam] Widget code translates events; decisions live here
//   and in the modules this class composes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from rich.text import Text

from formwidgets.core.class_names import modifier_classes
from formwidgets.core.config import SelectConfig
from formwidgets.core.focus import FocusCoordinator, FocusTarget, TaskScope
from formwidgets.core.geometry import PopupBounds, compute_popup_bounds
from formwidgets.core.keyboard import KeyboardRouter, KeyResult
from formwidgets.core.options import (
    MenuItem,
    MenuNode,
    Node,
    Option,
    OptionValue,
    button_label,
    checked_options,
    parse_options,
    render_tree,
)
from formwidgets.core.presentation import (
    NativeEntry,
    Presentation,
    autoselect_value,
    choose_presentation,
    native_entries,
    native_flags_for,
    should_autoselect,
    values_from_native,
)
from formwidgets.core.protocols import SelectView
from formwidgets.core.selection_state import SelectionState, SelectionStore, next_checked
from formwidgets.core.viewport import ViewportObserver, ViewportQuery

logger = logging.getLogger(__name__)

UNSET: Any = object()


@dataclass(frozen=True)
class SelectEvent:
    """Host-facing event: where it came from plus the current value."""

    source: str
    value: list[OptionValue]
    key: str | None = None


EventCallback = Callable[[SelectEvent], None]


@dataclass
class SelectCallbacks:
    on_change: Callable[[list[OptionValue]], None] | None = None
    on_toggle: Callable[[bool], None] | None = None
    on_focus: EventCallback | None = None
    on_blur: EventCallback | None = None
    on_button_focus: EventCallback | None = None
    on_button_blur: EventCallback | None = None
    on_menu_focus: EventCallback | None = None
    on_menu_blur: EventCallback | None = None
    on_click: EventCallback | None = None
    on_click_outside: Callable[[], None] | None = None
    on_key_down: EventCallback | None = None


def _fire(callback: Callable | None, *args) -> None:
    if callback is not None:
        callback(*args)


class SelectController:
    def __init__(
        self,
        config: SelectConfig,
        view: SelectView,
        *,
        options: Iterable[Any] = (),
        value: Sequence[OptionValue] | None = None,
        default_value: Sequence[OptionValue] | None = None,
        opened: bool | None = None,
        disabled: bool = False,
        callbacks: SelectCallbacks | None = None,
        viewport_query: ViewportQuery | None = None,
    ) -> None:
        self.config = config
        self.view = view
        self.callbacks = callbacks or SelectCallbacks()
        self.nodes: tuple[Node, ...] = parse_options(options)
        self.store = SelectionStore(
            config.mode,
            options=self.nodes,
            value=value,
            default_value=default_value,
            opened=opened,
            disabled=disabled,
            on_change=lambda new_value: _fire(self.callbacks.on_change, new_value),
            on_toggle=lambda flag: _fire(self.callbacks.on_toggle, flag),
        )
        self.tasks = TaskScope(view.schedule)
        self.focus_coordinator = FocusCoordinator(
            self.store,
            view,
            self.tasks,
            lambda: self.presentation,
            render_popup_on_focus=config.render_popup_on_focus,
        )
        self.keyboard = KeyboardRouter(self.store, self.focus_coordinator, view)
        self.viewport = ViewportObserver(viewport_query or ViewportQuery(), self.viewport_changed)
        self.mounted = False

    # -- Derived reads -------------------------------------------------------

    @property
    def value(self) -> list[OptionValue]:
        return self.store.value

    @property
    def opened(self) -> bool:
        return self.store.opened

    @property
    def disabled(self) -> bool:
        return self.store.disabled

    @property
    def state(self) -> SelectionState:
        return self.store.snapshot()

    @property
    def presentation(self) -> Presentation:
        return choose_presentation(self.store.state.is_mobile, self.config.mobile_menu_mode)

    @property
    def popup_bounds(self) -> PopupBounds:
        return self.store.state.popup_bounds

    @property
    def panel_visible(self) -> bool:
        """Whether the floating panel should be shown at all."""
        if not self.presentation.has_panel:
            return False
        if self.config.render_popup_on_focus:
            return self.opened and self.store.state.popup_ready
        return self.opened

    @property
    def panel_mountable(self) -> bool:
        """Whether the panel exists in the widget tree."""
        if not self.presentation.has_panel:
            return False
        return self.opened or not self.config.render_popup_on_focus

    def menu_content(self) -> tuple[MenuNode, ...]:
        return render_tree(self.nodes)

    def native_rows(self) -> list[NativeEntry]:
        return native_entries(
            self.nodes,
            self.config.mode,
            self.store.state.has_group,
            self.config.native_option_placeholder,
        )

    def native_flags(self) -> list[tuple[bool, bool]]:
        return native_flags_for(self.nodes, self.config.mode, self.store.state.has_group, self.value)

    def checked_items(self) -> list[Option]:
        return checked_options(self.nodes, self.value)

    def button_text(self) -> tuple[str | Text, bool]:
        render = self.config.render_button_content
        if render is not None:
            checked = self.checked_items()
            return render(checked), not checked
        return button_label(
            self.nodes,
            self.value,
            placeholder=self.config.placeholder,
            label=self.config.label,
        )

    def form_value(self) -> str:
        """Value as submitted by a hidden form field."""
        return ",".join(str(v) for v in self.value)

    def modifiers(self) -> frozenset[str]:
        config = self.config
        value = self.value
        return modifier_classes(
            {
                "mode": config.mode,
                "size": config.size,
                "view": config.view,
                "width": config.width,
                "theme": config.theme,
                "checked": bool(value),
                "disabled": self.disabled,
                "has-label": bool(config.label),
                "has-value": bool(value),
                "has-placeholder": bool(config.placeholder),
                "invalid": bool(config.error),
                "opened": self.opened,
                "no-tick": config.hide_tick,
                "mobile": self.store.state.is_mobile,
            }
        )

    def _event(self, source: str, key: str | None = None) -> SelectEvent:
        return SelectEvent(source=source, value=self.value, key=key)

    # -- Lifecycle -----------------------------------------------------------

    def mount(self) -> None:
        self.mounted = True
        if should_autoselect(
            self.config.render_popup_on_focus, self.config.mode, self.nodes, self.value
        ):
            logger.debug("auto-selecting first option")
            self.option_checked(autoselect_value(self.nodes))
        self.sync_geometry()

    def unmount(self) -> None:
        self.mounted = False
        self.tasks.close()

    def update(
        self,
        *,
        options: Iterable[Any] | None = UNSET,
        value: Sequence[OptionValue] | None = UNSET,
        opened: bool | None = UNSET,
        disabled: bool | None = None,
    ) -> None:
        """Apply host prop changes. Passing ``None`` for value/opened releases
        the field back to internal tracking; omitting it leaves it as is."""
        if options is not UNSET:
            self.nodes = parse_options(options)
        self.store.sync_props(
            options=self.nodes if options is not UNSET else None,
            value=value if value is not UNSET and value is not None else None,
            release_value=value is None,
            opened=opened if opened is not UNSET else None,
            release_opened=opened is None,
            disabled=disabled,
        )
        self.sync_geometry()
        self.view.refresh_view()

    # -- Geometry ------------------------------------------------------------

    def sync_geometry(self) -> PopupBounds:
        bounds = compute_popup_bounds(self.view.anchor_width(), self.config.equal_popup_width)
        self.store.set_popup_bounds(bounds)
        return bounds

    def anchor_resized(self) -> None:
        if self.opened:
            self.sync_geometry()
            self.view.refresh_view()

    def viewport_changed(self, is_small: bool) -> None:
        if self.store.set_mobile(is_small):
            logger.debug("viewport class changed: small=%s", is_small)
            self.sync_geometry()
            if self.mounted:
                self.view.refresh_view()

    # -- Anchor --------------------------------------------------------------

    def anchor_clicked(self) -> None:
        self.focus_coordinator.anchor_clicked()
        self.view.refresh_view()
        _fire(self.callbacks.on_click, self._event("button"))

    def anchor_key(self, key: str) -> KeyResult:
        result = self.keyboard.anchor_key(key)
        if result.handled:
            self.view.refresh_view()
        _fire(self.callbacks.on_key_down, self._event("button", key))
        return result

    def anchor_focused(self) -> None:
        _fire(self.callbacks.on_button_focus, self._event("button"))

    def anchor_blurred(self) -> None:
        _fire(self.callbacks.on_button_blur, self._event("button"))

    # -- Panel ---------------------------------------------------------------

    def panel_focused(self) -> None:
        self.focus_coordinator.panel_focused()
        event = self._event("menu")
        _fire(self.callbacks.on_focus, event)
        _fire(self.callbacks.on_menu_focus, event)

    def panel_blurred(self, new_target: FocusTarget) -> None:
        if self.focus_coordinator.panel_blurred(new_target):
            self.view.refresh_view()
        event = self._event("menu")
        _fire(self.callbacks.on_blur, event)
        _fire(self.callbacks.on_menu_blur, event)

    def panel_key(self, key: str, highlighted: MenuItem | None) -> KeyResult:
        result = self.keyboard.panel_key(key, highlighted, self.item_checked)
        if result.handled:
            self.view.refresh_view()
        _fire(self.callbacks.on_key_down, self._event("menu", key))
        return result

    def panel_mounted(self) -> None:
        self.focus_coordinator.panel_mounted()

    def panel_unmounted(self) -> None:
        self.focus_coordinator.panel_unmounted()

    def item_checked(self, item: MenuItem) -> None:
        """The user checked a menu row (click or keyboard)."""
        self.option_checked(next_checked(self.config.mode, self.value, item.value))

    def option_checked(self, new_value: Sequence[OptionValue]) -> None:
        closed = self.store.commit_option(new_value)
        self.focus_coordinator.option_committed(closed)
        self.view.refresh_view()

    def item_highlighted(self, item: MenuItem | None) -> None:
        if item is not None and not self.opened:
            self.view.scroll_highlighted_into_view(item)

    def click_outside(self) -> None:
        self.store.set_opened(False)
        self.view.refresh_view()
        _fire(self.callbacks.on_click_outside)

    def closer_clicked(self) -> None:
        self.store.set_opened(False)
        self.view.refresh_view()

    # -- Native --------------------------------------------------------------

    def native_changed(self, option_flags: Sequence[tuple[bool, bool]]) -> list[OptionValue]:
        values = values_from_native(
            self.nodes, self.config.mode, self.store.state.has_group, option_flags
        )
        if self.config.mode.is_single:
            self.view.blur_active()
        values = self.store.set_selection(values)
        self.view.refresh_view()
        return values

    def native_focused(self) -> None:
        self.focus_coordinator.native_focused()
        self.view.refresh_view()
        _fire(self.callbacks.on_focus, self._event("native"))

    def native_blurred(self) -> None:
        self.focus_coordinator.native_blurred()
        self.view.refresh_view()
        _fire(self.callbacks.on_blur, self._event("native"))

    def native_clicked(self) -> None:
        _fire(self.callbacks.on_click, self._event("native"))

    # -- Imperative ----------------------------------------------------------

    def focus(self) -> None:
        if self.presentation is Presentation.NATIVE:
            self.view.focus_native()
            return
        self.view.focus_anchor()
        self.focus_coordinator.open()
        self.view.refresh_view()

    def blur(self) -> None:
        self.view.blur_active()
