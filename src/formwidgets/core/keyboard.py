"""Keyboard router — maps keys to open/close/navigate/commit actions.

State machine over {Closed, Open}:

    Closed  enter|space on anchor  -> Open, focus panel
    Open    up|down                -> Open, highlighted row scrolled into view
    Open    enter|space            -> Open in check mode, else toggled; panel refocused
    Open    escape                 -> pending close, focus back to anchor

Handled keys suppress their default action; every other key passes through.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from formwidgets.core.focus import FocusCoordinator
from formwidgets.core.options import MenuItem
from formwidgets.core.protocols import SelectView
from formwidgets.core.selection_state import SelectionMode, SelectionStore

logger = logging.getLogger(__name__)


class KeyAction(Enum):
    TOGGLE = auto()
    NAVIGATE = auto()
    COMMIT = auto()
    ESCAPE = auto()


# [LAW:one-source-of-truth] Key→action mapping per focus context.
ANCHOR_KEYMAP: dict[str, KeyAction] = {
    "enter": KeyAction.TOGGLE,
    "space": KeyAction.TOGGLE,
}

PANEL_KEYMAP: dict[str, KeyAction] = {
    "up": KeyAction.NAVIGATE,
    "down": KeyAction.NAVIGATE,
    "enter": KeyAction.COMMIT,
    "space": KeyAction.COMMIT,
    "escape": KeyAction.ESCAPE,
}


@dataclass(frozen=True)
class KeyResult:
    action: KeyAction | None
    prevent_default: bool

    @property
    def handled(self) -> bool:
        return self.action is not None


PASS_THROUGH = KeyResult(None, False)


class KeyboardRouter:
    def __init__(
        self,
        store: SelectionStore,
        focus: FocusCoordinator,
        view: SelectView,
    ) -> None:
        self.store = store
        self.focus = focus
        self.view = view

    def anchor_key(self, key: str) -> KeyResult:
        action = ANCHOR_KEYMAP.get(key)
        if action is None:
            return PASS_THROUGH
        if not self.store.disabled:
            self.focus.toggle()
        return KeyResult(action, True)

    def panel_key(
        self,
        key: str,
        highlighted: MenuItem | None,
        commit: Callable[[MenuItem], None],
    ) -> KeyResult:
        """Route a key pressed while the panel has focus.

        ``commit`` checks the highlighted item through the same path a click
        takes; it runs before the opened flag is settled.
        """
        action = PANEL_KEYMAP.get(key)
        if action is None:
            return PASS_THROUGH

        if action is KeyAction.NAVIGATE:
            self.view.scroll_highlighted_into_view(highlighted)
        elif action is KeyAction.COMMIT:
            opened_at_press = self.store.opened
            if highlighted is not None:
                commit(highlighted)
            keep_open = self.store.mode is SelectionMode.CHECK
            self.store.set_opened(True if keep_open else not opened_at_press)
            self.focus.request_panel_focus()
        elif action is KeyAction.ESCAPE:
            self.focus.escape_pressed()

        logger.debug("panel key %r -> %s", key, action.name)
        return KeyResult(action, True)
