"""Popup geometry derived from the anchor's rendered width.

Recomputed synchronously on every render pass that can change the anchor
width (label or tick changes), on anchor resize while opened, and on
viewport-class changes. The anchor width is read, never written.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PopupBounds:
    """Width constraints for the floating panel, in cells."""

    min_width: int | None = None
    max_width: int | None = None


def compute_popup_bounds(anchor_width: int | None, equal_popup_width: bool) -> PopupBounds:
    """Floor the panel at the anchor width; pin it there when equal width is on."""
    if anchor_width is None:
        return PopupBounds()
    width = max(0, int(anchor_width))
    return PopupBounds(
        min_width=width,
        max_width=width if equal_popup_width else None,
    )
