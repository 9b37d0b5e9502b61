"""Focus coordinator — routes focus between anchor, panel and native control.

Decides for every focus/blur arriving from the three focus targets whether
the logical opened state changes, and where physical focus goes next.

Rules:
1. Anchor click (not disabled) toggles opened.
2. Panel focus leaves state unchanged; the value snapshot goes to the host.
3. Panel blur closes iff an escape-close is pending or focus did not land
   on the anchor.
4. Escape while open marks a pending close and moves focus to the anchor;
   the blur from rule 3 completes the close. A deferred re-check completes
   it when no blur arrives (focus had already left the panel).
5. Native control focus/blur toggles opened for visual affordance only.
6. Opening requests focus on the panel, except when the native control is
   the active presentation.

// [LAW:single-enforcer] Only this module moves focus between widget parts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum, auto

from formwidgets.core.options import OptionValue
from formwidgets.core.presentation import Presentation
from formwidgets.core.protocols import SelectView
from formwidgets.core.selection_state import SelectionStore

logger = logging.getLogger(__name__)


class FocusTarget(Enum):
    """Where focus landed, as seen from the widget."""

    ANCHOR = auto()
    PANEL = auto()
    NATIVE = auto()
    OUTSIDE = auto()


# ---------------------------------------------------------------------------
# Deferred work tied to the widget lifetime
# ---------------------------------------------------------------------------


class ScheduledTask:
    """Fire-once deferred callback that can be cancelled before it runs."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        self.cancelled = True

    def run(self) -> None:
        if self.cancelled or self.done:
            return
        self.done = True
        self._callback()


class TaskScope:
    """Cancelable deferrals owned by one widget instance.

    close() cancels everything pending, so no deferred callback mutates a
    widget that has been torn down.
    """

    def __init__(self, scheduler: Callable[[Callable[[], None]], object]) -> None:
        self._scheduler = scheduler
        self._pending: list[ScheduledTask] = []
        self.closed = False

    def schedule(self, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(callback)
        if self.closed:
            task.cancel()
            return task
        self._pending.append(task)
        self._scheduler(lambda: self._run(task))
        return task

    def _run(self, task: ScheduledTask) -> None:
        if task in self._pending:
            self._pending.remove(task)
        if self.closed:
            task.cancel()
        task.run()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def close(self) -> None:
        self.closed = True
        if self._pending:
            logger.debug("cancelling %d deferred task(s) on teardown", len(self._pending))
        for task in self._pending:
            task.cancel()
        self._pending.clear()


# ---------------------------------------------------------------------------
# Coordinator
# ---------------------------------------------------------------------------


class FocusCoordinator:
    def __init__(
        self,
        store: SelectionStore,
        view: SelectView,
        tasks: TaskScope,
        presentation: Callable[[], Presentation],
        *,
        render_popup_on_focus: bool = False,
    ) -> None:
        self.store = store
        self.view = view
        self.tasks = tasks
        self._presentation = presentation
        self.render_popup_on_focus = render_popup_on_focus

    def anchor_clicked(self) -> bool:
        """Rule 1. Returns False when the click was ignored."""
        if self.store.disabled:
            return False
        self.toggle()
        return True

    def toggle(self) -> bool:
        opened = self.store.toggle_opened()
        if opened:
            self.request_panel_focus()
        return opened

    def open(self) -> None:
        self.store.set_opened(True)
        self.request_panel_focus()

    def panel_focused(self) -> list[OptionValue]:
        """Rule 2."""
        return self.store.value

    def panel_blurred(self, new_target: FocusTarget) -> bool:
        """Rule 3. Returns True when the blur closed the panel."""
        state = self.store.state
        if state.await_closing or new_target is not FocusTarget.ANCHOR:
            state.await_closing = False
            self.store.set_opened(False)
            return True
        return False

    def escape_pressed(self) -> None:
        """Rule 4."""
        self.store.state.await_closing = True
        self.view.focus_anchor()
        self.tasks.schedule(self._settle_pending_close)

    def _settle_pending_close(self) -> None:
        state = self.store.state
        if state.await_closing:
            logger.debug("escape close settled without a panel blur")
            state.await_closing = False
            self.store.set_opened(False)
            self.view.refresh_view()

    def native_focused(self) -> None:
        """Rule 5."""
        if not self.store.disabled:
            self.store.toggle_opened()

    def native_blurred(self) -> None:
        if not self.store.disabled:
            self.store.toggle_opened()

    def request_panel_focus(self) -> bool:
        """Rule 6. Returns True when focus moved into the panel."""
        if self._presentation() is Presentation.NATIVE:
            logger.debug("panel focus skipped: native control owns focus")
            return False
        if not self.store.opened:
            return False
        if not self.view.has_panel():
            # Focus-triggered rendering: panel_mounted() finishes the job.
            return False
        moved = self.view.focus_panel()
        if not moved:
            logger.debug("panel focus transfer failed; not retrying")
        return moved

    def panel_mounted(self) -> None:
        """A focus-triggered panel became mountable: focus it after refresh."""
        if not self.render_popup_on_focus:
            return
        self.store.state.popup_ready = True
        self.tasks.schedule(self.request_panel_focus)

    def panel_unmounted(self) -> None:
        self.store.state.popup_ready = False

    def option_committed(self, closed: bool) -> None:
        """Return focus to the anchor when a commit closed the panel."""
        if closed:
            self.view.focus_anchor()
