"""Scroll arithmetic for keeping the highlighted menu row visible."""

from __future__ import annotations

# Seconds for the smooth scroll of the menu container.
SCROLL_TO_NORMAL_DURATION = 0.25

# Rows left above a field scrolled to the top of its container.
SCROLL_TO_CORRECTION = 1


def highlight_scroll_target(
    item_top: int,
    item_height: int,
    scroll_top: float,
    viewport_height: int,
) -> float | None:
    """Return the scroll offset that reveals an item, or None if it is visible.

    An item below the visible window is scrolled to the top edge; an item
    above it is scrolled so it sits on the bottom edge.
    """
    if item_top + item_height > scroll_top + viewport_height:
        return float(item_top)
    if item_top < scroll_top:
        return float(max(0, item_top - viewport_height + item_height))
    return None



def field_scroll_target(
    field_top: int,
    container_top: int,
    scroll_top: float,
    correction: int = SCROLL_TO_CORRECTION,
) -> float:
    """Scroll offset that puts a field ``correction`` rows below the top edge.

    ``field_top`` and ``container_top`` are screen rows taken at the current
    ``scroll_top``.
    """
    return float(max(0, field_top - container_top + scroll_top - correction))
