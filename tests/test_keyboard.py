"""Tests for the keyboard router state machine."""

from unittest.mock import MagicMock

import pytest
from rich.text import Text

from formwidgets.core.focus import FocusCoordinator, TaskScope
from formwidgets.core.keyboard import ANCHOR_KEYMAP, PANEL_KEYMAP, KeyAction, KeyboardRouter
from formwidgets.core.options import MenuItem
from formwidgets.core.presentation import Presentation
from formwidgets.core.selection_state import SelectionMode, SelectionStore, next_checked
from tests.harness.fakes import FakeView

ITEM = MenuItem(value="a", content=Text("A"))


def make(mode=SelectionMode.CHECK, **store_kwargs):
    view = FakeView()
    store = SelectionStore(mode, **store_kwargs)
    focus = FocusCoordinator(store, view, TaskScope(view.schedule), lambda: Presentation.CUSTOM)
    router = KeyboardRouter(store, focus, view)

    def commit(item):
        closed = store.commit_option(next_checked(mode, store.value, item.value))
        focus.option_committed(closed)

    return router, store, view, commit


def test_keymaps():
    assert set(ANCHOR_KEYMAP) == {"enter", "space"}
    assert PANEL_KEYMAP["escape"] is KeyAction.ESCAPE
    assert PANEL_KEYMAP["up"] is PANEL_KEYMAP["down"] is KeyAction.NAVIGATE


class TestAnchorKeys:
    @pytest.mark.parametrize("key", ["enter", "space"])
    def test_toggle_keys_open_and_prevent_default(self, key):
        router, store, view, _ = make()
        result = router.anchor_key(key)
        assert result.action is KeyAction.TOGGLE
        assert result.prevent_default
        assert store.opened
        assert view.count("focus_panel") == 1

    def test_other_keys_pass_through(self):
        router, store, _, _ = make()
        result = router.anchor_key("tab")
        assert not result.handled
        assert not result.prevent_default
        assert not store.opened

    def test_disabled_swallows_without_toggling(self):
        router, store, _, _ = make(disabled=True)
        assert router.anchor_key("enter").prevent_default
        assert not store.opened


class TestPanelKeys:
    @pytest.mark.parametrize("key", ["up", "down"])
    def test_navigation_scrolls_highlighted_row(self, key):
        router, store, view, commit = make()
        store.set_opened(True)
        result = router.panel_key(key, ITEM, commit)
        assert result.action is KeyAction.NAVIGATE
        assert view.scrolled == [ITEM]
        assert store.opened

    def test_check_mode_commit_stays_open_and_refocuses_panel(self):
        router, store, view, commit = make()
        store.set_opened(True)
        router.panel_key("enter", ITEM, commit)
        assert store.value == ["a"]
        assert store.opened
        assert view.calls[-1] == "focus_panel"

    @pytest.mark.parametrize("mode", [SelectionMode.RADIO, SelectionMode.RADIO_CHECK])
    def test_single_mode_commit_closes_and_focuses_anchor(self, mode):
        on_toggle = MagicMock()
        router, store, view, commit = make(mode, on_toggle=on_toggle)
        store.set_opened(True)
        on_toggle.reset_mock()
        router.panel_key("space", ITEM, commit)
        assert store.value == ["a"]
        assert not store.opened
        on_toggle.assert_called_once_with(False)
        assert "focus_anchor" in view.calls
        assert view.count("focus_panel") == 0

    def test_commit_without_highlight_only_settles_opened(self):
        router, store, _, commit = make(SelectionMode.RADIO)
        store.set_opened(True)
        router.panel_key("enter", None, commit)
        assert store.value == []
        assert not store.opened

    def test_escape_marks_pending_close(self):
        router, store, view, commit = make()
        store.set_opened(True)
        result = router.panel_key("escape", ITEM, commit)
        assert result.action is KeyAction.ESCAPE
        assert store.state.await_closing
        assert view.calls[-1] == "focus_anchor"
        view.flush()
        assert not store.opened

    def test_unmapped_keys_pass_through(self):
        router, store, view, commit = make()
        store.set_opened(True)
        assert router.panel_key("a", ITEM, commit).handled is False
        assert view.scrolled == []
