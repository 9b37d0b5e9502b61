"""Controlled/uncontrolled mirror for single-value form fields.

Text inputs, text areas and toggles share one rule: when the host supplies
a value the field shows it and only reports changes; otherwise the field
tracks the value itself. The change callback fires either way.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from formwidgets.core.selection_state import resolve

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ValueMirror(Generic[T]):
    def __init__(
        self,
        default: T,
        *,
        value: T | None = None,
        on_change: Callable[[T], None] | None = None,
    ) -> None:
        self._external = value
        self._internal = default
        self._on_change = on_change
        self.focused = False

    @property
    def value(self) -> T:
        return resolve(self._external, self._internal)

    @property
    def controlled(self) -> bool:
        return self._external is not None

    def change(self, new_value: T) -> T:
        """Record a user edit and notify. Returns the value now shown."""
        if not self.controlled:
            self._internal = new_value
        logger.debug("field change %r (controlled=%s)", new_value, self.controlled)
        if self._on_change is not None:
            self._on_change(new_value)
        return self.value

    def sync(self, value: T | None) -> None:
        """Host prop update; ``None`` hands the field back to internal state."""
        if value is None and self._external is not None:
            # Keep showing the last controlled value until the user edits.
            self._internal = self._external
        self._external = value
