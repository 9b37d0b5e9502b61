"""Viewport-class observer — reports when the terminal crosses a breakpoint."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Terminal columns at or below which a viewport counts as "small".
SMALL_VIEWPORT_MAX_WIDTH = 60


@dataclass(frozen=True)
class ViewportQuery:
    """Breakpoint descriptor: matches widths inside [min_width, max_width]."""

    max_width: int | None = SMALL_VIEWPORT_MAX_WIDTH
    min_width: int | None = None

    def matches(self, width: int) -> bool:
        if self.max_width is not None and width > self.max_width:
            return False
        if self.min_width is not None and width < self.min_width:
            return False
        return True


class ViewportObserver:
    """Feeds terminal widths through a query and reports match flips.

    The first update always reports. A viewport that never updates keeps the
    last known match.
    """

    def __init__(
        self,
        query: ViewportQuery,
        on_match_change: Callable[[bool], None],
    ) -> None:
        self.query = query
        self._on_match_change = on_match_change
        self._matched: bool | None = None

    @property
    def matched(self) -> bool:
        return bool(self._matched)

    def update(self, width: int) -> bool:
        matched = self.query.matches(width)
        if matched != self._matched:
            logger.debug("viewport width=%d matched=%s", width, matched)
            self._matched = matched
            self._on_match_change(matched)
        return matched
