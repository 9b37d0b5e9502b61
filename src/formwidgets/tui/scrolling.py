"""Scroll form fields into view inside their scrollable ancestor."""

from __future__ import annotations

from textual.widget import Widget

from formwidgets.core.scroll import SCROLL_TO_NORMAL_DURATION, field_scroll_target


def scroll_container(widget: Widget) -> Widget:
    """Nearest ancestor that scrolls vertically; the screen otherwise."""
    for node in widget.ancestors:
        if isinstance(node, Widget) and node.styles.overflow_y in ("auto", "scroll"):
            return node
    return widget.screen


def scroll_field_to_top(widget: Widget, *, animate: bool = True) -> None:
    container = scroll_container(widget)
    y = field_scroll_target(widget.region.y, container.content_region.y, container.scroll_y)
    container.scroll_to(y=y, animate=animate, duration=SCROLL_TO_NORMAL_DURATION)
