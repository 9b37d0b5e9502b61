"""Contracts between the select core and whatever renders it.

The Textual widget implements SelectView; tests use a recording fake.
"""

from collections.abc import Callable
from typing import Protocol

from formwidgets.core.options import MenuItem


class SelectView(Protocol):
    """Rendering surface the select controller drives.

    Focus methods return False when the target cannot take focus (not
    mounted, hidden). The controller never retries a failed transfer.
    """

    def anchor_width(self) -> int | None:
        """Current rendered width of the anchor, None before layout."""
        ...

    def focus_anchor(self) -> bool:
        ...

    def focus_panel(self) -> bool:
        ...

    def focus_native(self) -> bool:
        ...

    def blur_active(self) -> None:
        """Drop focus from whichever part of the widget holds it."""
        ...

    def has_panel(self) -> bool:
        """True when a panel is mounted and able to take focus."""
        ...

    def scroll_highlighted_into_view(self, item: MenuItem | None) -> None:
        ...

    def refresh_view(self) -> None:
        """Re-render from the controller's current state."""
        ...

    def schedule(self, callback: Callable[[], None]) -> None:
        """Run callback once after the current refresh (zero-delay deferral)."""
        ...
