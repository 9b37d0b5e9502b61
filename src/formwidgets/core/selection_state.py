"""Selection state store — selected values, opened flag, mobile flag, geometry.

Supports controlled fields (host supplies ``value`` / ``opened``) and
uncontrolled fields (tracked internally), decided per field.

// [LAW:single-enforcer] resolve() is the only place a controlled field is
//   merged with its internal counterpart.
// [LAW:one-source-of-truth] For each field exactly one source is
//   authoritative: the external value when supplied, else internal state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TypeVar

from formwidgets.core.geometry import PopupBounds
from formwidgets.core.options import Node, OptionValue, has_group

logger = logging.getLogger(__name__)

T = TypeVar("T")

ChangeCallback = Callable[[list[OptionValue]], None]
ToggleCallback = Callable[[bool], None]


class SelectionMode(str, Enum):
    CHECK = "check"
    RADIO = "radio"
    RADIO_CHECK = "radio-check"

    @property
    def is_single(self) -> bool:
        return self is not SelectionMode.CHECK


def resolve(external: T | None, internal: T) -> T:
    """Per-field source of truth: the external value wins when supplied."""
    return internal if external is None else external


def next_checked(
    mode: SelectionMode, checked: Sequence[OptionValue], value: OptionValue
) -> list[OptionValue]:
    """Value list the menu reports when the user checks ``value``."""
    current = list(checked)
    if mode is SelectionMode.CHECK:
        if value in current:
            return [v for v in current if v != value]
        return current + [value]
    if mode is SelectionMode.RADIO_CHECK and current == [value]:
        return []
    return [value]


@dataclass
class SelectionState:
    """Internal (uncontrolled) half of the widget state."""

    value: list[OptionValue] = field(default_factory=list)
    opened: bool = False
    is_mobile: bool = False
    popup_bounds: PopupBounds = field(default_factory=PopupBounds)
    await_closing: bool = False
    has_group: bool = False
    popup_ready: bool = False


class SelectionStore:
    """Owns SelectionState and the controlled/uncontrolled merge."""

    def __init__(
        self,
        mode: SelectionMode = SelectionMode.CHECK,
        *,
        options: Sequence[Node] = (),
        value: Sequence[OptionValue] | None = None,
        default_value: Sequence[OptionValue] | None = None,
        opened: bool | None = None,
        disabled: bool = False,
        on_change: ChangeCallback | None = None,
        on_toggle: ToggleCallback | None = None,
    ) -> None:
        self.mode = SelectionMode(mode)
        self.options: tuple[Node, ...] = tuple(options)
        self.disabled = disabled
        self._external_value = list(value) if value is not None else None
        self._external_opened = opened
        self._on_change = on_change
        self._on_toggle = on_toggle
        initial = value if value is not None else default_value
        self.state = SelectionState(
            value=list(initial or []),
            opened=bool(opened),
            has_group=has_group(self.options),
        )

    # -- Merged reads --------------------------------------------------------

    @property
    def value(self) -> list[OptionValue]:
        return list(resolve(self._external_value, self.state.value))

    @property
    def opened(self) -> bool:
        if self.disabled:
            return False
        return resolve(self._external_opened, self.state.opened)

    @property
    def value_controlled(self) -> bool:
        return self._external_value is not None

    @property
    def opened_controlled(self) -> bool:
        return self._external_opened is not None

    def snapshot(self) -> SelectionState:
        """Copy of the state with controlled fields already merged in."""
        return replace(self.state, value=self.value, opened=self.opened)

    # -- Mutations -----------------------------------------------------------

    def set_selection(self, new_value: Sequence[OptionValue]) -> list[OptionValue]:
        """Replace the selection and notify the host.

        Single-select modes keep only the most recent value.
        """
        values = list(new_value)
        if self.mode.is_single:
            values = values[-1:]
        if not self.value_controlled:
            self.state.value = list(values)
        logger.debug("selection set to %r (controlled=%s)", values, self.value_controlled)
        if self._on_change is not None:
            self._on_change(list(values))
        return values

    def commit_option(self, new_value: Sequence[OptionValue]) -> bool:
        """Commit a panel item check. Returns True when the panel closed."""
        was_opened = self.opened
        self.set_selection(new_value)
        self.set_opened(self.mode is SelectionMode.CHECK)
        return was_opened and not self.opened

    def set_opened(self, flag: bool) -> bool:
        """Request an opened state. The toggle callback fires on every change
        request, even when the host controls the field."""
        target = bool(flag)
        previous = self.opened
        if not self.opened_controlled:
            self.state.opened = target
        if target != previous:
            logger.debug("opened -> %s (controlled=%s)", target, self.opened_controlled)
            if self._on_toggle is not None:
                self._on_toggle(target)
        return self.opened

    def toggle_opened(self) -> bool:
        """Flip the opened flag. Returns the requested new state."""
        target = not self.opened
        self.set_opened(target)
        return target

    def set_mobile(self, is_mobile: bool) -> bool:
        changed = self.state.is_mobile != bool(is_mobile)
        self.state.is_mobile = bool(is_mobile)
        return changed

    def set_popup_bounds(self, bounds: PopupBounds) -> None:
        self.state.popup_bounds = bounds

    # -- Host prop transitions -----------------------------------------------

    def sync_props(
        self,
        *,
        options: Sequence[Node] | None = None,
        value: Sequence[OptionValue] | None = None,
        opened: bool | None = None,
        disabled: bool | None = None,
        release_value: bool = False,
        release_opened: bool = False,
    ) -> None:
        """Apply a host prop update.

        ``None`` leaves a field untouched; the ``release_*`` flags hand a
        controlled field back to internal state.
        """
        if options is not None:
            self.options = tuple(options)
        if value is not None:
            self._external_value = list(value)
        elif release_value:
            self._external_value = None
        if opened is not None:
            self._external_opened = opened
        elif release_opened:
            self._external_opened = None

        was_opened = self.opened
        if disabled is not None and disabled != self.disabled:
            if disabled and was_opened:
                logger.debug("forced close: widget disabled while opened")
                self.state.opened = False
                if self._on_toggle is not None:
                    self._on_toggle(False)
            self.disabled = disabled

        self.state.has_group = has_group(self.options)
