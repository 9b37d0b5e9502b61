"""Tests for deferred task scoping and the focus coordinator rules."""

from unittest.mock import MagicMock

import pytest

from formwidgets.core.focus import FocusCoordinator, FocusTarget, TaskScope
from formwidgets.core.presentation import Presentation
from formwidgets.core.selection_state import SelectionMode, SelectionStore
from tests.harness.fakes import FakeView


class TestTaskScope:
    def test_runs_scheduled_callback_once(self):
        view = FakeView()
        scope = TaskScope(view.schedule)
        callback = MagicMock()
        task = scope.schedule(callback)
        assert scope.pending == 1
        view.flush()
        callback.assert_called_once()
        assert task.done
        assert scope.pending == 0

    def test_cancelled_task_never_runs(self):
        view = FakeView()
        scope = TaskScope(view.schedule)
        callback = MagicMock()
        scope.schedule(callback).cancel()
        view.flush()
        callback.assert_not_called()

    def test_close_cancels_pending_work(self):
        view = FakeView()
        scope = TaskScope(view.schedule)
        callback = MagicMock()
        task = scope.schedule(callback)
        scope.close()
        view.flush()
        callback.assert_not_called()
        assert task.cancelled

    def test_schedule_after_close_is_inert(self):
        view = FakeView()
        scope = TaskScope(view.schedule)
        scope.close()
        task = scope.schedule(MagicMock())
        assert task.cancelled
        assert view.queued == []


def make(mode=SelectionMode.CHECK, presentation=Presentation.CUSTOM, render_popup_on_focus=False, **store_kwargs):
    view = FakeView()
    store = SelectionStore(mode, **store_kwargs)
    coordinator = FocusCoordinator(
        store,
        view,
        TaskScope(view.schedule),
        lambda: presentation,
        render_popup_on_focus=render_popup_on_focus,
    )
    return coordinator, store, view


class TestAnchor:
    def test_click_toggles_and_focuses_panel_when_opening(self):
        focus, store, view = make()
        assert focus.anchor_clicked()
        assert store.opened
        assert view.count("focus_panel") == 1
        focus.anchor_clicked()
        assert not store.opened
        assert view.count("focus_panel") == 1

    def test_click_ignored_when_disabled(self):
        focus, store, view = make(disabled=True)
        assert focus.anchor_clicked() is False
        assert not store.opened
        assert view.calls == []


class TestPanelBlur:
    def test_blur_to_anchor_keeps_open(self):
        focus, store, _ = make()
        store.set_opened(True)
        assert focus.panel_blurred(FocusTarget.ANCHOR) is False
        assert store.opened

    @pytest.mark.parametrize("target", [FocusTarget.OUTSIDE, FocusTarget.NATIVE, FocusTarget.PANEL])
    def test_blur_elsewhere_closes(self, target):
        focus, store, _ = make()
        store.set_opened(True)
        assert focus.panel_blurred(target) is True
        assert not store.opened

    def test_pending_escape_close_completes_on_blur_to_anchor(self):
        focus, store, _ = make()
        store.set_opened(True)
        focus.escape_pressed()
        assert focus.panel_blurred(FocusTarget.ANCHOR) is True
        assert not store.opened
        assert not store.state.await_closing

    def test_panel_focus_returns_value(self):
        focus, _, _ = make(value=["x"])
        assert focus.panel_focused() == ["x"]


class TestEscape:
    def test_escape_moves_focus_to_anchor(self):
        focus, store, view = make()
        store.set_opened(True)
        focus.escape_pressed()
        assert store.state.await_closing
        assert view.calls[-1] == "focus_anchor"
        assert store.opened

    def test_deferred_settle_closes_without_blur(self):
        on_toggle = MagicMock()
        focus, store, view = make(on_toggle=on_toggle)
        store.set_opened(True)
        on_toggle.reset_mock()
        focus.escape_pressed()
        view.flush()
        assert not store.opened
        on_toggle.assert_called_once_with(False)
        assert view.refreshes == 1

    def test_blur_then_settle_closes_exactly_once(self):
        on_toggle = MagicMock()
        focus, store, view = make(on_toggle=on_toggle)
        store.set_opened(True)
        on_toggle.reset_mock()
        focus.escape_pressed()
        focus.panel_blurred(FocusTarget.ANCHOR)
        view.flush()
        on_toggle.assert_called_once_with(False)


class TestNative:
    def test_focus_and_blur_toggle(self):
        focus, store, _ = make()
        focus.native_focused()
        assert store.opened
        focus.native_blurred()
        assert not store.opened

    def test_disabled_native_is_inert(self):
        focus, store, _ = make(disabled=True)
        focus.native_focused()
        assert not store.opened


class TestRequestPanelFocus:
    def test_skipped_in_native_presentation(self):
        focus, store, view = make(presentation=Presentation.NATIVE)
        store.set_opened(True)
        assert focus.request_panel_focus() is False
        assert view.count("focus_panel") == 0

    def test_skipped_when_closed(self):
        focus, _, view = make()
        assert focus.request_panel_focus() is False
        assert view.count("focus_panel") == 0

    def test_skipped_without_mounted_panel(self):
        focus, store, view = make()
        view.panel = False
        store.set_opened(True)
        assert focus.request_panel_focus() is False
        assert view.count("focus_panel") == 0

    def test_failed_transfer_is_not_retried(self):
        focus, store, view = make()
        view.focus_moves = False
        store.set_opened(True)
        assert focus.request_panel_focus() is False
        view.flush()
        assert view.count("focus_panel") == 1


class TestFocusTriggeredPanel:
    def test_mount_marks_ready_and_focuses_after_refresh(self):
        focus, store, view = make(render_popup_on_focus=True)
        store.set_opened(True)
        focus.panel_mounted()
        assert store.state.popup_ready
        assert view.count("focus_panel") == 0
        view.flush()
        assert view.count("focus_panel") == 1
        focus.panel_unmounted()
        assert not store.state.popup_ready

    def test_mount_is_ignored_otherwise(self):
        focus, store, view = make()
        focus.panel_mounted()
        assert not store.state.popup_ready
        assert view.queued == []


def test_commit_that_closed_returns_focus_to_anchor():
    focus, _, view = make()
    focus.option_committed(False)
    assert view.calls == []
    focus.option_committed(True)
    assert view.calls == ["focus_anchor"]
